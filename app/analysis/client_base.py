from abc import ABC, abstractmethod


class BaseAnalysisClient(ABC):
    """Contract for provider-specific analysis AI clients."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
        max_tokens: int | None = None,
    ) -> str:
        """Return provider response as plain text."""
