from datetime import datetime

from pydantic import BaseModel

from app.database.models import Document, Extraction


class DocumentResponse(BaseModel):
    """Public view of a document. Storage paths stay server-side."""

    id: str
    owner_id: str
    original_file_name: str
    title: str | None = None
    authors: str | None = None
    published_at: datetime | None = None
    summary: str | None = None
    insights: list[str] | None = None
    stored_locally: bool = False
    stored_remotely: bool = False
    created_at: datetime | None = None

    @classmethod
    def from_document(cls, document: Document) -> "DocumentResponse":
        return cls(
            id=document.id,
            owner_id=document.owner_id,
            original_file_name=document.original_file_name,
            title=document.title,
            authors=document.authors,
            published_at=document.published_at,
            summary=document.summary,
            insights=document.insights,
            stored_locally=bool(document.local_path),
            stored_remotely=bool(document.remote_key),
            created_at=document.created_at,
        )


class ExtractionResponse(BaseModel):
    id: str
    document_id: str
    summary: str
    insights: list[str]
    created_at: datetime | None = None

    @classmethod
    def from_extraction(cls, extraction: Extraction) -> "ExtractionResponse":
        return cls(
            id=extraction.id,
            document_id=extraction.document_id,
            summary=extraction.summary,
            insights=list(extraction.insights),
            created_at=extraction.created_at,
        )


class HealthResponse(BaseModel):
    status: str
