import io

import pdfplumber

from app.pdf.base import BasePdfExtractor
from app.pdf.exceptions import PdfExtractionError
from app.pdf.heuristics import guess_authors, guess_title, metadata_value
from app.pdf.models import ExtractedDocument


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts text and info-dictionary metadata using pdfplumber."""

    def extract(self, pdf_bytes: bytes) -> ExtractedDocument:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
                metadata = dict(pdf.metadata or {})
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber extraction failed: {exc}") from exc

        text = "\n".join(pages).strip()
        return ExtractedDocument(
            text=text,
            title=metadata_value(metadata, "Title") or guess_title(text),
            authors=metadata_value(metadata, "Author") or guess_authors(text),
            published_at_raw=metadata_value(metadata, "CreationDate"),
        )
