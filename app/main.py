import uvicorn

from app.api.app import create_app
from app.config.settings import Settings
from app.logging.logger import Log


def main() -> None:
    """Entry point: load settings -> configure logging -> serve the HTTP API."""
    settings = Settings()
    Log.configure(settings.log_level)
    Log.info(f"Starting document service on {settings.http_host}:{settings.http_port}")
    uvicorn.run(
        create_app(settings),
        host=settings.http_host,
        port=settings.http_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
