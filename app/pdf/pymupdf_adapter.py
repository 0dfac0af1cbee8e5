import pymupdf

from app.pdf.base import BasePdfExtractor
from app.pdf.exceptions import PdfExtractionError
from app.pdf.heuristics import guess_authors, guess_title, metadata_value
from app.pdf.models import ExtractedDocument


class PyMuPdfAdapter(BasePdfExtractor):
    """Extracts text and document metadata using PyMuPDF."""

    def extract(self, pdf_bytes: bytes) -> ExtractedDocument:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
                metadata = dict(doc.metadata or {})
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf extraction failed: {exc}") from exc

        text = "\n".join(pages).strip()
        return ExtractedDocument(
            text=text,
            title=metadata_value(metadata, "title") or guess_title(text),
            authors=metadata_value(metadata, "author") or guess_authors(text),
            published_at_raw=metadata_value(metadata, "creationDate"),
        )
