from datetime import datetime, timezone

from app.analysis.models import MetadataRefinement
from app.database.models import Document
from app.orchestrator.merge import merge_metadata

_PREVIOUS_DATE = datetime(2019, 6, 1, tzinfo=timezone.utc)


def _document(**overrides: object) -> Document:
    fields: dict[str, object] = {
        "id": "doc-1",
        "owner_id": "user-1",
        "original_file_name": "paper.pdf",
        "title": "Old Title",
        "authors": "Old Author",
        "published_at": _PREVIOUS_DATE,
    }
    fields.update(overrides)
    return Document(**fields)  # type: ignore[arg-type]


class TestMergeMetadata:
    def test_refined_values_win_when_present(self) -> None:
        merged = merge_metadata(
            _document(),
            MetadataRefinement(title="New Title", authors="New Author", published_at="2021-05-12"),
        )
        assert merged.title == "New Title"
        assert merged.authors == "New Author"
        assert merged.published_at == datetime(2021, 5, 12, tzinfo=timezone.utc)

    def test_missing_values_keep_existing(self) -> None:
        merged = merge_metadata(_document(), MetadataRefinement())
        assert merged.title == "Old Title"
        assert merged.authors == "Old Author"
        assert merged.published_at == _PREVIOUS_DATE

    def test_blank_values_keep_existing(self) -> None:
        merged = merge_metadata(_document(), MetadataRefinement(title="   ", authors=""))
        assert merged.title == "Old Title"
        assert merged.authors == "Old Author"

    def test_refined_values_are_stripped(self) -> None:
        merged = merge_metadata(_document(), MetadataRefinement(title="  Spaced  "))
        assert merged.title == "Spaced"

    def test_invalid_refined_date_keeps_previous_date(self) -> None:
        merged = merge_metadata(_document(), MetadataRefinement(published_at="2021-02-30"))
        assert merged.published_at == _PREVIOUS_DATE

    def test_invalid_refined_date_with_no_previous_stays_empty(self) -> None:
        merged = merge_metadata(
            _document(published_at=None), MetadataRefinement(published_at="sometime")
        )
        assert merged.published_at is None

    def test_fills_empty_fields(self) -> None:
        merged = merge_metadata(
            _document(title=None, authors=None), MetadataRefinement(title="T", authors="A")
        )
        assert merged.title == "T"
        assert merged.authors == "A"
