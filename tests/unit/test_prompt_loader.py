"""Tests for prompt template and JSON schema loading."""

import json
from pathlib import Path

import pytest

from app.analysis.exceptions import AnalysisError
from app.analysis.prompt_loader import (
    load_json_schema,
    load_prompt_template,
    load_system_prompt,
)


class TestLoadPromptTemplate:
    def test_loads_default_template(self) -> None:
        template = load_prompt_template()
        for placeholder in ("{document_text}", "{json_schema}", "{language}", "{title}"):
            assert placeholder in template

    def test_default_template_formats_without_stray_braces(self) -> None:
        rendered = load_prompt_template().format(
            language="English",
            title="t",
            authors="a",
            published_at="p",
            json_schema="{}",
            document_text="body",
        )
        assert "body" in rendered

    def test_loads_custom_template(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.txt"
        custom.write_text("Hello {document_text}")
        assert load_prompt_template(custom) == "Hello {document_text}"

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(AnalysisError, match="Failed to load prompt"):
            load_prompt_template(Path("/nonexistent/file.txt"))


class TestLoadJsonSchema:
    def test_loads_default_schema(self) -> None:
        schema = json.loads(load_json_schema())
        assert schema["additionalProperties"] is False
        assert set(schema["properties"]) == {"summary", "insights", "metadata"}

    def test_loads_custom_schema(self, tmp_path: Path) -> None:
        custom = tmp_path / "schema.json"
        custom.write_text('{"type": "object"}')
        assert load_json_schema(custom) == '{"type": "object"}'

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(AnalysisError, match="Failed to load JSON schema"):
            load_json_schema(Path("/nonexistent/schema.json"))


class TestLoadSystemPrompt:
    def test_default_prompt_sets_analyst_role(self) -> None:
        prompt = load_system_prompt()
        assert prompt.startswith("You are an expert analyst")
        assert "{" not in prompt

    def test_role_is_not_repeated_in_user_template(self) -> None:
        assert "You are" not in load_prompt_template()

    def test_loads_custom_prompt_without_trailing_newline(self, tmp_path: Path) -> None:
        custom = tmp_path / "system.txt"
        custom.write_text("Be terse.\n")
        assert load_system_prompt(custom) == "Be terse."

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(AnalysisError, match="Failed to load system prompt"):
            load_system_prompt(Path("/nonexistent/system.txt"))
