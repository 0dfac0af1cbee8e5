from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractedDocument:
    """Text and weak metadata guesses pulled out of a PDF.

    ``published_at_raw`` is whatever the file claims (usually the PDF
    ``CreationDate``); it has not been validated as a date.
    """

    text: str
    title: str | None = None
    authors: str | None = None
    published_at_raw: str | None = None
