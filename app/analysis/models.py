from dataclasses import dataclass, field

NO_SUMMARY = "No summary available"


@dataclass(frozen=True)
class MetadataHints:
    """Metadata known before analysis, passed to the provider as context."""

    title: str | None = None
    authors: str | None = None
    published_at: str | None = None


@dataclass(frozen=True)
class MetadataRefinement:
    """Metadata proposed by the provider. Values are unvalidated strings."""

    title: str | None = None
    authors: str | None = None
    published_at: str | None = None


@dataclass(frozen=True)
class AnalysisResult:
    """Output of the analysis step."""

    summary: str
    insights: list[str] = field(default_factory=list)
    refinement: MetadataRefinement = field(default_factory=MetadataRefinement)
