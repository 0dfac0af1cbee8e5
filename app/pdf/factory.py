from app.config.settings import Settings
from app.logging.logger import Log
from app.pdf.base import BasePdfExtractor
from app.pdf.pdfplumber_adapter import PdfPlumberAdapter
from app.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Picks the text extractor used on upload and analysis.

    ``PDF_ENGINE`` is matched case-insensitively; ``fitz`` (PyMuPDF's import
    name) and ``plumber`` are accepted as aliases.
    """

    ENGINES: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }
    ALIASES: dict[str, str] = {
        "fitz": "pymupdf",
        "plumber": "pdfplumber",
    }

    @classmethod
    def engine_name(cls, configured: str) -> str:
        """Canonical engine name for a configured value.

        Raises:
            ValueError: if the value names no known engine.
        """
        name = configured.strip().lower()
        name = cls.ALIASES.get(name, name)
        if name not in cls.ENGINES:
            raise ValueError(
                f"Unknown PDF engine '{configured.strip()}'. Choose from: {sorted(cls.ENGINES)}"
            )
        return name

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        name = cls.engine_name(settings.pdf_engine)
        Log.debug(f"Using {name} for PDF text extraction")
        return cls.ENGINES[name]()
