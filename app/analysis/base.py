from abc import ABC, abstractmethod

from app.analysis.models import AnalysisResult, MetadataHints


class BaseAnalyzer(ABC):
    """Contract for all document analysis adapters."""

    @abstractmethod
    def analyze(self, text: str, hints: MetadataHints | None = None) -> AnalysisResult:
        """Summarize document text and refine its metadata.

        Args:
            text: Plain text extracted from the document.
            hints: Metadata already known for the document, if any.

        Returns:
            AnalysisResult with summary, ordered insights and refined metadata.

        Raises:
            AnalysisNetworkError: when the provider cannot be reached.
            AnalysisError: when the provider response is unusable.
        """
