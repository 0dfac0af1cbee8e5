"""Document upload, analysis and download endpoints.

Handlers are plain ``def`` so FastAPI runs them in its thread pool; a slow
analysis never blocks the event loop.
"""

from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from fastapi.responses import StreamingResponse

from app.api.dependencies import get_orchestrator, get_owner_id
from app.api.schemas import DocumentResponse, ExtractionResponse
from app.orchestrator.orchestrator import DocumentOrchestrator

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
def upload_document(
    *,
    file: UploadFile = File(...),
    owner_id: str = Depends(get_owner_id),
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> DocumentResponse:
    document = orchestrator.upload(
        file.file,
        file_name=file.filename,
        content_type=file.content_type,
        declared_size=file.size,
        owner_id=owner_id,
    )
    return DocumentResponse.from_document(document)


@router.get("", response_model=list[DocumentResponse])
def list_documents(
    *,
    owner_id: str = Depends(get_owner_id),
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> list[DocumentResponse]:
    """Return the caller's documents, newest first."""
    return [DocumentResponse.from_document(d) for d in orchestrator.list_documents(owner_id)]


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(
    document_id: str,
    *,
    owner_id: str = Depends(get_owner_id),
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> DocumentResponse:
    return DocumentResponse.from_document(orchestrator.get(document_id, owner_id))


@router.post("/{document_id}/analyze", response_model=DocumentResponse)
def analyze_document(
    document_id: str,
    *,
    owner_id: str = Depends(get_owner_id),
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> DocumentResponse:
    return DocumentResponse.from_document(orchestrator.analyze(document_id, owner_id))


@router.get("/{document_id}/download")
def download_document(
    document_id: str,
    *,
    owner_id: str = Depends(get_owner_id),
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> StreamingResponse:
    result = orchestrator.download(document_id, owner_id)
    return StreamingResponse(
        result.chunks,
        media_type=result.content_type,
        headers={"Content-Disposition": content_disposition(result.file_name)},
    )


@router.get("/{document_id}/extractions", response_model=list[ExtractionResponse])
def list_extractions(
    document_id: str,
    *,
    owner_id: str = Depends(get_owner_id),
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> list[ExtractionResponse]:
    """Return every analysis run of the document, oldest first."""
    return [
        ExtractionResponse.from_extraction(e)
        for e in orchestrator.list_extractions(document_id, owner_id)
    ]


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    document_id: str,
    *,
    owner_id: str = Depends(get_owner_id),
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> Response:
    orchestrator.delete(document_id, owner_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def content_disposition(file_name: str) -> str:
    """Attachment header with an ASCII fallback name and an RFC 5987 variant."""
    fallback = file_name.encode("ascii", "ignore").decode("ascii")
    fallback = fallback.replace("\\", "_").replace('"', "_").strip() or "document.pdf"
    header = f'attachment; filename="{fallback}"'
    if fallback != file_name:
        header += f"; filename*=UTF-8''{quote(file_name)}"
    return header
