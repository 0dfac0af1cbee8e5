"""AI-powered document analyzer."""

import json
from pathlib import Path

from app.analysis.base import BaseAnalyzer
from app.analysis.client_base import BaseAnalysisClient
from app.analysis.exceptions import AnalysisError
from app.analysis.models import AnalysisResult, MetadataHints
from app.analysis.prompt_loader import load_json_schema, load_prompt_template
from app.analysis.validator import validate_and_build
from app.logging.logger import Log

DEFAULT_MAX_INPUT_CHARS = 15000
TRUNCATION_MARKER = "..."


class Analyzer(BaseAnalyzer):
    """Summarizes document text and refines its metadata using an AI provider."""

    def __init__(
        self,
        *,
        client: BaseAnalysisClient,
        model: str,
        temperature: float = 0.2,
        language: str = "English",
        max_input_chars: int = DEFAULT_MAX_INPUT_CHARS,
        max_output_tokens: int | None = None,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = "",
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._language = language
        self._max_input_chars = max_input_chars
        self._max_output_tokens = max_output_tokens
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template(prompt_template_path)
        schema_str = load_json_schema(json_schema_path)
        self._json_schema = schema_str
        try:
            self._json_schema_dict = json.loads(schema_str)
        except json.JSONDecodeError as exc:
            raise AnalysisError(f"Invalid JSON schema: {exc}") from exc

    def analyze(self, text: str, hints: MetadataHints | None = None) -> AnalysisResult:
        """Summarize document text and refine its metadata."""
        prompt = self._build_prompt(self.truncate(text), hints or MetadataHints())
        Log.debug(f"Analysis prompt length: {len(prompt)} chars")

        raw_response = self._call_ai(prompt)
        Log.debug(f"AI raw response:\n{raw_response}")

        parsed = self._parse_json(raw_response)
        result = validate_and_build(parsed)

        Log.info(f"Analysis complete: {len(result.insights)} insights extracted")
        return result

    def truncate(self, text: str) -> str:
        if len(text) <= self._max_input_chars:
            return text
        return text[: self._max_input_chars] + TRUNCATION_MARKER

    def _build_prompt(self, text: str, hints: MetadataHints) -> str:
        return self._prompt_template.format(
            language=self._language,
            title=hints.title or "unknown",
            authors=hints.authors or "unknown",
            published_at=hints.published_at or "unknown",
            json_schema=self._json_schema,
            document_text=text,
        )

    def _call_ai(self, prompt: str) -> str:
        return self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_schema=self._json_schema_dict,
            max_tokens=self._max_output_tokens,
        )

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise AnalysisError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise AnalysisError("JSON response must be an object")
        return parsed
