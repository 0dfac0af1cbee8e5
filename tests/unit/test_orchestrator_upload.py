import io
from datetime import datetime, timezone
from pathlib import Path

import pytest

from app.orchestrator.exceptions import (
    ExtractionFailedError,
    InvalidInputError,
    PayloadTooLargeError,
    PersistenceFailedError,
)
from app.orchestrator.resolution import blob_address
from app.pdf.models import ExtractedDocument
from tests.fakes import Harness, build_harness

PAYLOAD = b"%PDF-1.4 fake upload body"
OWNER = "user-1"


@pytest.fixture
def harness(tmp_path: Path) -> Harness:
    return build_harness(tmp_path / "staging")


def _upload(harness: Harness, data: bytes = PAYLOAD, **overrides: object):
    kwargs: dict[str, object] = {
        "file_name": "paper.pdf",
        "content_type": "application/pdf",
        "declared_size": len(data),
        "owner_id": OWNER,
    }
    kwargs.update(overrides)
    return harness.orchestrator.upload(io.BytesIO(data), **kwargs)  # type: ignore[arg-type]


def _staged_files(harness: Harness) -> list[Path]:
    return list(harness.staging.root.iterdir())


class TestSuccessfulUpload:
    def test_creates_one_promoted_document(self, harness: Harness) -> None:
        document = _upload(harness)

        assert list(harness.documents.rows) == [document.id]
        assert document.owner_id == OWNER
        assert document.original_file_name == "paper.pdf"
        assert document.remote_key == f"/documents/documents/{document.id}/paper.pdf"
        assert document.local_path is None

    def test_remote_object_holds_uploaded_bytes(self, harness: Harness) -> None:
        document = _upload(harness)
        stored = b"".join(harness.blob_store.get(*blob_address(document)))
        assert stored == PAYLOAD

    def test_staged_file_is_removed_after_promotion(self, harness: Harness) -> None:
        _upload(harness)
        assert _staged_files(harness) == []

    def test_extractor_receives_uploaded_bytes(self, harness: Harness) -> None:
        _upload(harness)
        assert harness.extractor.calls == [PAYLOAD]

    def test_heuristic_metadata_is_stored(self, harness: Harness) -> None:
        harness.extractor.result = ExtractedDocument(
            text="body",
            title="Guessed Title",
            authors="Jane Doe",
            published_at_raw="D:20210512103000Z",
        )
        document = _upload(harness)
        assert document.title == "Guessed Title"
        assert document.authors == "Jane Doe"
        assert document.published_at == datetime(2021, 5, 12, 10, 30, tzinfo=timezone.utc)

    def test_unparseable_date_is_not_stored(self, harness: Harness) -> None:
        harness.extractor.result = ExtractedDocument(
            text="body", published_at_raw="sometime last spring"
        )
        document = _upload(harness)
        assert document.published_at is None

    def test_content_type_parameters_are_ignored(self, harness: Harness) -> None:
        document = _upload(harness, content_type="Application/PDF; charset=binary")
        assert document.remote_key is not None

    def test_upload_at_exact_size_limit_is_accepted(self, tmp_path: Path) -> None:
        harness = build_harness(tmp_path, max_upload_bytes=len(PAYLOAD))
        document = _upload(harness)
        assert document.id in harness.documents.rows

    def test_missing_declared_size_is_accepted(self, harness: Harness) -> None:
        document = _upload(harness, declared_size=None)
        assert document.id in harness.documents.rows


class TestPromotionFailures:
    def test_put_failure_keeps_local_copy(self, harness: Harness) -> None:
        harness.blob_store.fail_put = True

        document = _upload(harness)

        assert document.remote_key is None
        assert document.local_path is not None
        assert Path(document.local_path).read_bytes() == PAYLOAD
        assert harness.documents.rows[document.id].local_path == document.local_path

    def test_size_mismatch_keeps_local_copy(self, harness: Harness) -> None:
        harness.blob_store.short_stat = True

        document = _upload(harness)

        assert document.remote_key is None
        assert document.local_path is not None
        assert Path(document.local_path).is_file()

    def test_remote_key_not_recorded_keeps_local_copy(self, harness: Harness) -> None:
        harness.documents.fail_update_storage = True

        document = _upload(harness)

        assert document.remote_key is None
        assert document.local_path is not None
        assert Path(document.local_path).is_file()

    def test_never_leaves_document_without_any_copy(self, harness: Harness) -> None:
        for flag in ("fail_put", "short_stat"):
            setattr(harness.blob_store, flag, True)
            document = _upload(harness)
            assert document.has_storage()
            if document.remote_key is None:
                assert Path(str(document.local_path)).is_file()
            setattr(harness.blob_store, flag, False)


class TestRejectedUploads:
    def test_one_byte_over_limit_creates_nothing(self, tmp_path: Path) -> None:
        harness = build_harness(tmp_path / "staging", max_upload_bytes=len(PAYLOAD) - 1)

        with pytest.raises(PayloadTooLargeError):
            _upload(harness)

        assert harness.documents.rows == {}
        assert _staged_files(harness) == []
        assert harness.blob_store.puts == 0

    def test_understated_size_is_caught_while_streaming(self, tmp_path: Path) -> None:
        harness = build_harness(tmp_path / "staging", max_upload_bytes=len(PAYLOAD) - 1)

        with pytest.raises(PayloadTooLargeError):
            _upload(harness, declared_size=1)

        assert harness.documents.rows == {}
        assert _staged_files(harness) == []
        assert harness.extractor.calls == []

    def test_payload_too_large_is_invalid_input(self) -> None:
        assert issubclass(PayloadTooLargeError, InvalidInputError)

    def test_unsupported_content_type(self, harness: Harness) -> None:
        with pytest.raises(InvalidInputError, match="Unsupported content type"):
            _upload(harness, content_type="image/png")
        assert harness.documents.rows == {}
        assert _staged_files(harness) == []

    def test_missing_content_type(self, harness: Harness) -> None:
        with pytest.raises(InvalidInputError):
            _upload(harness, content_type=None)

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_missing_file_name(self, harness: Harness, name: str | None) -> None:
        with pytest.raises(InvalidInputError, match="file name"):
            _upload(harness, file_name=name)

    def test_extraction_failure_discards_staged_file(self, harness: Harness) -> None:
        harness.extractor.fail = True

        with pytest.raises(ExtractionFailedError):
            _upload(harness)

        assert harness.documents.rows == {}
        assert _staged_files(harness) == []
        assert harness.blob_store.puts == 0

    def test_record_failure_discards_staged_file(self, harness: Harness) -> None:
        harness.documents.fail_create = True

        with pytest.raises(PersistenceFailedError) as exc_info:
            _upload(harness)

        assert exc_info.value.retryable is True
        assert _staged_files(harness) == []
        assert harness.blob_store.puts == 0
