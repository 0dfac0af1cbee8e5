from datetime import date, datetime, timedelta, timezone

import pytest

from app.orchestrator.dates import parse_published_date

UTC = timezone.utc


class TestParsesValidDates:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("2021-05-12", datetime(2021, 5, 12, tzinfo=UTC)),
            ("2021-05-12T10:30:00Z", datetime(2021, 5, 12, 10, 30, tzinfo=UTC)),
            ("2021", datetime(2021, 1, 1, tzinfo=UTC)),
            ("2021-05", datetime(2021, 5, 1, tzinfo=UTC)),
            ("May 2021", datetime(2021, 5, 1, tzinfo=UTC)),
            ("12 May 2021", datetime(2021, 5, 12, tzinfo=UTC)),
            ("May 12, 2021", datetime(2021, 5, 12, tzinfo=UTC)),
            ("D:20210512103000Z", datetime(2021, 5, 12, 10, 30, tzinfo=UTC)),
            ("D:2021", datetime(2021, 1, 1, tzinfo=UTC)),
            ("  2021-05-12  ", datetime(2021, 5, 12, tzinfo=UTC)),
        ],
    )
    def test_parses(self, raw: str, expected: datetime) -> None:
        assert parse_published_date(raw) == expected

    def test_keeps_iso_offset(self) -> None:
        result = parse_published_date("2021-05-12T10:00:00+02:00")
        assert result is not None
        assert result.utcoffset() == timedelta(hours=2)

    def test_parses_pdf_offset(self) -> None:
        result = parse_published_date("D:20210512103000+05'30'")
        assert result == datetime(2021, 5, 12, 5, 0, tzinfo=UTC)

    def test_parses_negative_pdf_offset(self) -> None:
        result = parse_published_date("D:20210512103000-08'00'")
        assert result == datetime(2021, 5, 12, 18, 30, tzinfo=UTC)

    def test_accepts_date_objects(self) -> None:
        assert parse_published_date(date(2020, 2, 29)) == datetime(2020, 2, 29, tzinfo=UTC)

    def test_naive_datetime_is_taken_as_utc(self) -> None:
        result = parse_published_date(datetime(2020, 1, 1, 8, 0))
        assert result is not None
        assert result.tzinfo is not None
        assert result == datetime(2020, 1, 1, 8, 0, tzinfo=UTC)


class TestRejectsInvalidDates:
    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "   ",
            "not a date",
            "2021-13-01",
            "2021-02-30",
            "D:20211301",
            "D:20210230",
            "D:20210512103000+25'00'",
            "yesterday",
            "12/34/2021",
            "9999-12-31T23:00:00-05:00",
            "D:99991231230000-05'00'",
            "0001-01-01T00:30:00+01:00",
        ],
    )
    def test_returns_none(self, raw: str) -> None:
        assert parse_published_date(raw) is None

    @pytest.mark.parametrize("raw", [None, 2021, 20.5, ["2021"], {"year": 2021}])
    def test_non_strings_return_none(self, raw: object) -> None:
        assert parse_published_date(raw) is None

    def test_datetime_outside_utc_range_returns_none(self) -> None:
        edge = datetime(9999, 12, 31, 23, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert parse_published_date(edge) is None
