from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime


@dataclass
class DownloadResult:
    """Bytes of a document ready to stream back to its owner."""

    file_name: str
    content_type: str
    chunks: Iterator[bytes]


@dataclass(frozen=True)
class MergedMetadata:
    title: str | None
    authors: str | None
    published_at: datetime | None
