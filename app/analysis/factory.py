from typing import ClassVar

from app.analysis.analyzer import Analyzer
from app.analysis.base import BaseAnalyzer
from app.analysis.example_client_adapter import ExampleClientAdapter
from app.analysis.openai_client_adapter import OpenAIClientAdapter
from app.analysis.prompt_loader import load_system_prompt
from app.config.settings import Settings


class AnalyzerFactory:
    """Creates the configured analyzer."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseAnalyzer:
        """Create a configured analyzer from application settings."""
        provider = settings.analysis_provider.lower()
        if provider == "example":
            return Analyzer(
                client=ExampleClientAdapter(),
                model="example",
                temperature=0.0,
                language=settings.analysis_language,
                max_input_chars=settings.analysis_max_input_chars,
                system_prompt=load_system_prompt(),
            )
        client = OpenAIClientAdapter(
            api_key=settings.analysis_api_key,
            timeout_seconds=settings.analysis_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )
        return Analyzer(
            client=client,
            model=settings.analysis_model_name,
            temperature=settings.analysis_temperature,
            language=settings.analysis_language,
            max_input_chars=settings.analysis_max_input_chars,
            max_output_tokens=settings.analysis_max_output_tokens,
            system_prompt=load_system_prompt(),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        configured = (settings.analysis_base_url or "").strip()
        if provider == "openai":
            return configured or None
        if provider == "openai_compatible":
            if not configured:
                raise ValueError(
                    "analysis_base_url is required for analysis_provider=openai_compatible"
                )
            return configured
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return configured or default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(f"Unknown analysis provider '{provider}'. Choose from: {supported}")
