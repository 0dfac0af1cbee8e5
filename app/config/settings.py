from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    http_host: str = "0.0.0.0"
    http_port: int = 8000

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docinsight"
    db_username: str = "docinsight"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10

    staging_dir: Path = Path("/app/uploads")
    max_upload_bytes: int = 10 * 1024 * 1024
    allowed_content_types: list[str] = ["application/pdf"]

    pdf_engine: str = "pdfplumber"

    analysis_provider: str = "openai"
    analysis_api_key: str = ""
    analysis_model_name: str = "gpt-4o"
    analysis_base_url: str | None = None
    analysis_timeout_seconds: int = 60
    analysis_temperature: float = 0.2
    analysis_max_output_tokens: int = 3500
    analysis_max_input_chars: int = 15000
    analysis_language: str = "Brazilian Portuguese"

    blob_store_backend: str = "minio"
    minio_endpoint: str = "minio:9000"
    minio_access_key: str = "minioadmin"
    minio_secret_key: str = "minioadmin"
    minio_secure: bool = False
    minio_bucket: str = "documents"
    minio_create_bucket: bool = True
