from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Document:
    """Represents a row from the documents table."""

    id: str
    owner_id: str
    original_file_name: str
    title: str | None = None
    authors: str | None = None
    published_at: datetime | None = None
    local_path: str | None = None
    remote_key: str | None = None
    summary: str | None = None
    insights: list[str] | None = None
    created_at: datetime | None = None

    def has_storage(self) -> bool:
        """True when at least one tier claims to hold the bytes."""
        return bool(self.local_path) or bool(self.remote_key)


@dataclass
class Extraction:
    """Represents a row from the extractions table. Never updated."""

    id: str
    document_id: str
    summary: str
    insights: list[str] = field(default_factory=list)
    created_at: datetime | None = None
