import uuid
from collections.abc import Iterable, Iterator
from contextlib import ExitStack
from pathlib import Path
from typing import BinaryIO

import psycopg

from app.analysis.base import BaseAnalyzer
from app.analysis.exceptions import AnalysisError
from app.analysis.factory import AnalyzerFactory
from app.analysis.models import AnalysisResult, MetadataHints
from app.config.settings import Settings
from app.database.exceptions import RepositoryError
from app.database.models import Document, Extraction
from app.database.repositories.document_repository import DocumentRepository
from app.database.repositories.extraction_repository import ExtractionRepository
from app.logging.logger import Log
from app.orchestrator.dates import parse_published_date
from app.orchestrator.exceptions import (
    AnalysisServiceFailedError,
    ContentUnavailableError,
    ExtractionFailedError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    PayloadTooLargeError,
    PersistenceFailedError,
    StorageReadFailedError,
    StorageWriteFailedError,
)
from app.orchestrator.merge import merge_metadata
from app.orchestrator.models import DownloadResult
from app.orchestrator.resolution import (
    ANALYZE_ORDER,
    DOWNLOAD_ORDER,
    ContentResolver,
    ResolvedContent,
    Tier,
    blob_address,
)
from app.pdf.base import BasePdfExtractor
from app.pdf.exceptions import PdfExtractionError
from app.pdf.factory import PdfExtractorFactory
from app.pdf.models import ExtractedDocument
from app.storage.blob_store import BaseBlobStore
from app.storage.exceptions import BlobStoreError, StagingError, StagingSizeLimitError
from app.storage.factory import BlobStoreFactory, create_staging_store
from app.storage.staging import LocalStagingStore

DEFAULT_CONTENT_TYPE = "application/pdf"

_PERSISTENCE_ERRORS = (psycopg.Error, RepositoryError)


class DocumentOrchestrator:
    """Coordinates staging, blob storage, extraction, analysis and persistence.

    Upload: stage -> extract -> create record -> promote to blob store.
    Analyze: resolve bytes (local first) -> extract -> analyze -> merge -> persist.
    Download: resolve bytes (remote first) -> stream.
    """

    def __init__(
        self,
        *,
        documents: DocumentRepository,
        extractions: ExtractionRepository,
        staging: LocalStagingStore,
        blob_store: BaseBlobStore,
        pdf_extractor: BasePdfExtractor,
        analyzer: BaseAnalyzer,
        max_upload_bytes: int,
        allowed_content_types: Iterable[str] = (DEFAULT_CONTENT_TYPE,),
    ) -> None:
        self._documents = documents
        self._extractions = extractions
        self._staging = staging
        self._blob_store = blob_store
        self._pdf_extractor = pdf_extractor
        self._analyzer = analyzer
        self._max_upload_bytes = max_upload_bytes
        self._allowed_content_types = frozenset(t.lower() for t in allowed_content_types)
        self._resolver = ContentResolver(staging, blob_store)

    # Upload

    def upload(
        self,
        stream: BinaryIO,
        *,
        file_name: str | None,
        content_type: str | None,
        declared_size: int | None,
        owner_id: str,
    ) -> Document:
        """Store a new document and try to promote it to the blob store.

        Promotion failures are logged and swallowed; the returned document
        then still points at its staged local copy.
        """
        Log.info("Upload received", file_name=file_name, size=declared_size, owner_id=owner_id)
        name = self._validate_upload(file_name, content_type, declared_size)

        # Step 1: Stage
        try:
            staged = self._staging.write_stream(stream, name, max_bytes=self._max_upload_bytes)
        except StagingSizeLimitError as exc:
            raise PayloadTooLargeError(
                f"File exceeds the {self._max_upload_bytes} byte limit"
            ) from exc
        except StagingError as exc:
            raise StorageWriteFailedError("Could not stage the uploaded file") from exc
        Log.info(f"Staged upload as {staged.name}")

        # Step 2: Extract
        try:
            data = self._staging.read_bytes(staged)
        except StagingError as exc:
            self._staging.delete(staged)
            raise StorageReadFailedError("Could not read the staged upload") from exc
        extracted = self._extract_or_discard(data, staged)

        # Step 3: Create record
        document_id = str(uuid.uuid4())
        try:
            document = self._documents.create(
                document_id=document_id,
                owner_id=owner_id,
                original_file_name=name,
                local_path=str(staged),
                title=extracted.title,
                authors=extracted.authors,
                published_at=parse_published_date(extracted.published_at_raw),
            )
        except _PERSISTENCE_ERRORS as exc:
            Log.error(f"Could not create document record for {staged.name}: {exc}")
            self._staging.delete(staged)
            raise PersistenceFailedError("Could not save the document") from exc
        Log.info("Document created", document_id=document.id, owner_id=owner_id)

        # Step 4: Promote
        return self._promote(document, staged, data, content_type or DEFAULT_CONTENT_TYPE)

    def _validate_upload(
        self,
        file_name: str | None,
        content_type: str | None,
        declared_size: int | None,
    ) -> str:
        name = (file_name or "").strip()
        if not name:
            raise InvalidInputError("A file name is required")
        normalized_type = (content_type or "").split(";")[0].strip().lower()
        if normalized_type not in self._allowed_content_types:
            raise InvalidInputError(
                f"Unsupported content type '{content_type}'. "
                f"Allowed: {sorted(self._allowed_content_types)}"
            )
        if declared_size is not None and declared_size > self._max_upload_bytes:
            raise PayloadTooLargeError(f"File exceeds the {self._max_upload_bytes} byte limit")
        return name

    def _extract_or_discard(self, data: bytes, staged: Path) -> ExtractedDocument:
        try:
            extracted = self._pdf_extractor.extract(data)
        except PdfExtractionError as exc:
            Log.warning(f"Extraction of {staged.name} failed: {exc}")
            self._staging.delete(staged)
            raise ExtractionFailedError("Could not extract text from the file") from exc
        Log.info(f"Extracted {len(extracted.text)} chars from {staged.name}")
        return extracted

    def _promote(
        self,
        document: Document,
        staged: Path,
        data: bytes,
        content_type: str,
    ) -> Document:
        """Copy the staged bytes to the blob store and release the local copy.

        Every step only runs after the previous one succeeded, so on failure
        the document is left either local-only or, once the local file is
        gone, remote-only.
        """
        owner_key, file_name = blob_address(document)
        try:
            remote_key = self._blob_store.put(owner_key, file_name, data, content_type)
            stored_size = self._blob_store.stat(owner_key, file_name)
        except BlobStoreError as exc:
            Log.warning(f"Promotion failed, keeping local copy: {exc}", document_id=document.id)
            return document
        if stored_size != len(data):
            Log.warning(
                f"Promotion of document {document.id} failed verification: "
                f"stored {stored_size} bytes, expected {len(data)}"
            )
            return document

        try:
            document = self._documents.update_storage(document.id, remote_key=remote_key)
        except _PERSISTENCE_ERRORS as exc:
            Log.warning(f"Could not record remote key for document {document.id}: {exc}")
            return document

        try:
            self._staging.delete(staged)
        except OSError as exc:
            Log.warning(f"Could not delete staged copy of document {document.id}: {exc}")
            return document

        try:
            document = self._documents.update_storage(document.id, local_path=None)
        except _PERSISTENCE_ERRORS as exc:
            Log.warning(f"Could not clear local path of document {document.id}: {exc}")
            return document

        Log.info("Document promoted", document_id=document.id, remote_key=remote_key)
        return document

    # Analyze

    def analyze(self, document_id: str, owner_id: str) -> Document:
        """Run extraction and analysis on a stored document.

        Each call appends an Extraction and overwrites the document's latest
        summary, insights and metadata.
        """
        Log.info("Analyze requested", document_id=document_id, owner_id=owner_id)
        document = self._load_owned(document_id, owner_id)

        with ExitStack() as scope:
            data = self._analysis_bytes(document, scope)
            try:
                extracted = self._pdf_extractor.extract(data)
            except PdfExtractionError as exc:
                Log.warning(f"Extraction of document {document.id} failed: {exc}")
                raise ExtractionFailedError("Could not extract text from the file") from exc

            result = self._run_analysis(document, extracted.text)
            merged = merge_metadata(document, result.refinement)

            try:
                document, _extraction = self._documents.record_analysis(
                    document.id,
                    extraction_id=str(uuid.uuid4()),
                    title=merged.title,
                    authors=merged.authors,
                    published_at=merged.published_at,
                    summary=result.summary,
                    insights=result.insights,
                )
            except _PERSISTENCE_ERRORS as exc:
                Log.error(f"Could not save analysis of document {document.id}: {exc}")
                raise PersistenceFailedError("Could not save the analysis") from exc

        Log.info("Document analyzed", document_id=document.id, insights=len(result.insights))
        return document

    def _analysis_bytes(self, document: Document, scope: ExitStack) -> bytes:
        resolved = self._resolver.resolve(document, ANALYZE_ORDER)
        if resolved is None:
            Log.error(f"Document {document.id} has no readable copy in any storage tier")
            raise ContentUnavailableError("The document content is no longer available")

        if resolved.tier is Tier.LOCAL and resolved.path is not None:
            try:
                return self._staging.read_bytes(resolved.path)
            except StagingError as exc:
                raise StorageReadFailedError("Could not read the stored file") from exc

        temp_path = scope.enter_context(
            self._staging.temporary_path(document.id, document.original_file_name)
        )
        return self._stage_remote(document, resolved, temp_path)

    def _stage_remote(self, document: Document, resolved: ResolvedContent, temp_path: Path) -> bytes:
        try:
            written = self._staging.write_chunks(temp_path, resolved.chunks or iter(()))
            Log.debug(f"Staged {written} bytes of document {document.id} to {temp_path.name}")
            return self._staging.read_bytes(temp_path)
        except BlobStoreError as exc:
            raise StorageReadFailedError("Blob store read failed") from exc
        except StagingError as exc:
            raise StorageReadFailedError("Could not stage the stored file") from exc

    def _run_analysis(self, document: Document, text: str) -> AnalysisResult:
        hints = MetadataHints(
            title=document.title,
            authors=document.authors,
            published_at=document.published_at.isoformat() if document.published_at else None,
        )
        try:
            return self._analyzer.analyze(text, hints)
        except AnalysisError as exc:
            Log.error(f"Analysis of document {document.id} failed: {exc}")
            raise AnalysisServiceFailedError("The analysis service failed") from exc

    # Download

    def download(self, document_id: str, owner_id: str) -> DownloadResult:
        """Open the document's bytes, preferring the blob store copy."""
        Log.info("Download requested", document_id=document_id, owner_id=owner_id)
        document = self._load_owned(document_id, owner_id)
        resolved = self._resolver.resolve(document, DOWNLOAD_ORDER)
        if resolved is None:
            Log.error(f"Document {document.id} has no readable copy in any storage tier")
            raise NotFoundError("File not found")

        if resolved.tier is Tier.LOCAL and resolved.path is not None:
            try:
                chunks = self._staging.iter_chunks(resolved.path)
            except StagingError as exc:
                raise StorageReadFailedError("Could not read the stored file") from exc
        else:
            chunks = resolved.chunks or iter(())

        return DownloadResult(
            file_name=document.original_file_name,
            content_type=DEFAULT_CONTENT_TYPE,
            chunks=_guard_stream(chunks),
        )

    # Queries

    def get(self, document_id: str, owner_id: str) -> Document:
        return self._load_owned(document_id, owner_id)

    def list_documents(self, owner_id: str) -> list[Document]:
        try:
            return self._documents.list_by_owner(owner_id)
        except _PERSISTENCE_ERRORS as exc:
            raise PersistenceFailedError("Could not list documents") from exc

    def list_extractions(self, document_id: str, owner_id: str) -> list[Extraction]:
        document = self._load_owned(document_id, owner_id)
        try:
            return self._extractions.list_by_document(document.id)
        except _PERSISTENCE_ERRORS as exc:
            raise PersistenceFailedError("Could not list extractions") from exc

    def delete(self, document_id: str, owner_id: str) -> None:
        """Delete a document and release its bytes in both tiers.

        The record goes first; bytes that cannot be released afterwards are
        orphaned and logged, never left behind a live record.
        """
        Log.info("Delete requested", document_id=document_id, owner_id=owner_id)
        document = self._load_owned(document_id, owner_id)

        try:
            self._documents.delete(document.id)
        except _PERSISTENCE_ERRORS as exc:
            raise PersistenceFailedError("Could not delete the document") from exc

        if document.remote_key:
            owner_key, file_name = blob_address(document)
            try:
                self._blob_store.delete(owner_key, file_name)
            except BlobStoreError as exc:
                Log.warning(f"Orphaned remote object {document.remote_key}: {exc}")

        try:
            self._staging.delete(document.local_path)
        except OSError as exc:
            Log.warning(f"Orphaned staged file {document.local_path}: {exc}")
        Log.info("Document deleted", document_id=document.id)

    def _load_owned(self, document_id: str, owner_id: str) -> Document:
        try:
            document = self._documents.find_by_id(document_id)
        except _PERSISTENCE_ERRORS as exc:
            raise PersistenceFailedError("Could not load the document") from exc
        if document is None:
            raise NotFoundError(f"Document {document_id} not found")
        if document.owner_id != owner_id:
            Log.warning("Access denied", document_id=document_id, owner_id=owner_id)
            raise ForbiddenError()
        return document


def _guard_stream(chunks: Iterator[bytes]) -> Iterator[bytes]:
    try:
        yield from chunks
    except BlobStoreError as exc:
        raise StorageReadFailedError("Blob store read failed") from exc


def build_orchestrator(settings: Settings) -> DocumentOrchestrator:
    """Build a DocumentOrchestrator with all required adapters."""
    return DocumentOrchestrator(
        documents=DocumentRepository(),
        extractions=ExtractionRepository(),
        staging=create_staging_store(settings),
        blob_store=BlobStoreFactory.create(settings),
        pdf_extractor=PdfExtractorFactory.create(settings),
        analyzer=AnalyzerFactory.create(settings),
        max_upload_bytes=settings.max_upload_bytes,
        allowed_content_types=settings.allowed_content_types,
    )
