"""Lenient parsing of publication dates from PDF metadata and AI output.

Anything that does not resolve to a real calendar date is dropped, never
raised: a bad guess must not fail an upload or an analysis.
"""

import re
from datetime import date, datetime, timedelta, timezone

_PDF_DATE_RE = re.compile(
    r"^D:(?P<year>\d{4})(?P<month>\d{2})?(?P<day>\d{2})?"
    r"(?P<hour>\d{2})?(?P<minute>\d{2})?(?P<second>\d{2})?"
    r"(?P<tz>Z|[+-]\d{2}(?:'?\d{2})?)?"
)

_TEXT_FORMATS = (
    "%Y",
    "%Y-%m",
    "%Y/%m/%d",
    "%B %Y",
    "%b %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
)


def parse_published_date(raw: object) -> datetime | None:
    """Return a timezone-aware datetime for *raw*, or None if it is not a date.

    Naive values are taken as UTC. Values whose UTC instant falls outside the
    datetime range are dropped, since the database stores them as UTC.
    """
    if isinstance(raw, datetime):
        return _storable(_aware(raw))
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day, tzinfo=timezone.utc)
    if not isinstance(raw, str):
        return None

    value = raw.strip()
    if not value:
        return None

    for parser in (_parse_iso, _parse_pdf, _parse_text):
        parsed = parser(value)
        if parsed is not None:
            return _storable(parsed)
    return None


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _storable(value: datetime) -> datetime | None:
    try:
        value.astimezone(timezone.utc)
    except OverflowError:
        return None
    return value


def _parse_iso(value: str) -> datetime | None:
    candidate = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        return _aware(datetime.fromisoformat(candidate))
    except ValueError:
        return None


def _parse_pdf(value: str) -> datetime | None:
    match = _PDF_DATE_RE.match(value)
    if match is None:
        return None
    parts = match.groupdict()
    try:
        return datetime(
            int(parts["year"]),
            int(parts["month"] or 1),
            int(parts["day"] or 1),
            int(parts["hour"] or 0),
            int(parts["minute"] or 0),
            int(parts["second"] or 0),
            tzinfo=_pdf_offset(parts["tz"]),
        )
    except ValueError:
        return None


def _pdf_offset(raw: str | None) -> timezone:
    if not raw or raw == "Z":
        return timezone.utc
    digits = raw[1:].replace("'", "")
    hours = int(digits[:2])
    minutes = int(digits[2:4] or 0)
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid PDF date offset {raw!r}")
    offset = timedelta(hours=hours, minutes=minutes)
    return timezone(-offset if raw[0] == "-" else offset)


def _parse_text(value: str) -> datetime | None:
    for fmt in _TEXT_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return None
