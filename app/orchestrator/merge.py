from app.analysis.models import MetadataRefinement
from app.database.models import Document
from app.orchestrator.dates import parse_published_date
from app.orchestrator.models import MergedMetadata


def merge_metadata(document: Document, refinement: MetadataRefinement) -> MergedMetadata:
    """Combine stored metadata with what the analysis proposed.

    A refined value replaces the stored one only when it is non-empty after
    stripping. A refined date that does not parse keeps the stored date.
    """
    return MergedMetadata(
        title=_prefer(refinement.title, document.title),
        authors=_prefer(refinement.authors, document.authors),
        published_at=parse_published_date(refinement.published_at) or document.published_at,
    )


def _prefer(refined: str | None, current: str | None) -> str | None:
    if refined is not None and refined.strip():
        return refined.strip()
    return current
