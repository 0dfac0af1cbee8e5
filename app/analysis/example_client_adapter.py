"""Example analysis client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseAnalysisClient and register the provider in AnalyzerFactory.
"""

import json
from typing import ClassVar

from app.analysis.client_base import BaseAnalysisClient


class ExampleClientAdapter(BaseAnalysisClient):
    """Example adapter that returns a fixed valid analysis JSON.

    No network calls. Useful for local development and tests.
    """

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "summary": "Example summary of the submitted document.",
        "insights": ["Example insight"],
        "metadata": {"title": None, "authors": None, "published_at": None},
    }

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
        _ = model, temperature, system_prompt, user_prompt, json_schema, max_tokens
        return json.dumps(self.DEFAULT_RESPONSE)
