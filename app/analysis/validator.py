"""Validates raw parsed analysis JSON and builds an AnalysisResult."""

from typing import Any

from app.analysis.exceptions import AnalysisValidationError
from app.analysis.models import NO_SUMMARY, AnalysisResult, MetadataRefinement

_METADATA_FIELDS = ("title", "authors", "published_at")


def validate_and_build(data: dict[str, Any]) -> AnalysisResult:
    """Validate raw parsed JSON and build an AnalysisResult.

    A missing or blank summary becomes ``NO_SUMMARY``. Missing metadata
    means nothing to refine.

    Raises:
        AnalysisValidationError: on any other malformed field.
    """
    summary = _build_summary(data.get("summary"))
    insights = _build_insights(data.get("insights"))
    refinement = _build_refinement(data.get("metadata"))
    return AnalysisResult(summary=summary, insights=insights, refinement=refinement)


def _build_summary(raw: Any) -> str:
    if raw is None:
        return NO_SUMMARY
    if not isinstance(raw, str):
        raise AnalysisValidationError("'summary' must be a string")
    return raw.strip() or NO_SUMMARY


def _build_insights(raw: Any) -> list[str]:
    if raw is None:
        raise AnalysisValidationError("Missing required field: insights")
    if not isinstance(raw, list):
        raise AnalysisValidationError("'insights' must be a list")
    insights: list[str] = []
    for i, item in enumerate(raw):
        if not isinstance(item, str):
            raise AnalysisValidationError(f"Insight at index {i} must be a string")
        insights.append(item)
    return insights


def _build_refinement(raw: Any) -> MetadataRefinement:
    if raw is None:
        return MetadataRefinement()
    if not isinstance(raw, dict):
        raise AnalysisValidationError("'metadata' must be an object or null")
    values = {name: _build_metadata_value(raw.get(name), name) for name in _METADATA_FIELDS}
    return MetadataRefinement(**values)


def _build_metadata_value(raw: Any, name: str) -> str | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw
    # Some providers answer authors as a list despite the schema.
    if name == "authors" and isinstance(raw, list) and all(isinstance(a, str) for a in raw):
        return ", ".join(a.strip() for a in raw if a.strip())
    raise AnalysisValidationError(f"'metadata.{name}' must be a string or null")
