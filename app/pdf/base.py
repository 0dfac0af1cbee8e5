from abc import ABC, abstractmethod

from app.pdf.models import ExtractedDocument


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> ExtractedDocument:
        """Extract plain text and metadata guesses from PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            ExtractedDocument with normalized text and optional title,
            authors and raw date string.

        Raises:
            PdfExtractionError: if extraction fails for any reason.
        """
