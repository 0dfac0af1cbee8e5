import pytest

from app.pdf.exceptions import PdfExtractionError
from app.pdf.models import ExtractedDocument
from app.pdf.pdfplumber_adapter import PdfPlumberAdapter


class TestPdfPlumberAdapter:
    def test_extract_returns_text(self, sample_pdf_bytes: bytes) -> None:
        adapter = PdfPlumberAdapter()
        result = adapter.extract(sample_pdf_bytes)
        assert isinstance(result, ExtractedDocument)
        assert "Hello PDF World" in result.text

    def test_extract_multi_page(self, multi_page_pdf_bytes: bytes) -> None:
        adapter = PdfPlumberAdapter()
        result = adapter.extract(multi_page_pdf_bytes)
        assert "Page one content" in result.text
        assert "Page two content" in result.text

    def test_extract_empty_pdf_returns_empty_text(self, empty_pdf_bytes: bytes) -> None:
        adapter = PdfPlumberAdapter()
        result = adapter.extract(empty_pdf_bytes)
        assert result.text == ""

    def test_extract_raises_on_invalid_bytes(self) -> None:
        adapter = PdfPlumberAdapter()
        with pytest.raises(PdfExtractionError):
            adapter.extract(b"not a pdf")

    def test_extract_text_is_stripped(self, sample_pdf_bytes: bytes) -> None:
        adapter = PdfPlumberAdapter()
        result = adapter.extract(sample_pdf_bytes)
        assert result.text == result.text.strip()

    def test_reads_title_and_author_from_info_dictionary(self, titled_pdf_bytes: bytes) -> None:
        adapter = PdfPlumberAdapter()
        result = adapter.extract(titled_pdf_bytes)
        assert result.title == "Attention Is All You Need"
        assert result.authors == "Ashish Vaswani, Noam Shazeer"

    def test_reads_creation_date_as_raw_string(self, titled_pdf_bytes: bytes) -> None:
        adapter = PdfPlumberAdapter()
        result = adapter.extract(titled_pdf_bytes)
        assert result.published_at_raw is not None
        assert result.published_at_raw.startswith("D:")
