"""Fallback guesses for title and authors when PDF metadata is empty.

These are deliberately cheap: the analysis step refines them later.
"""

import re
from collections.abc import Mapping

_AUTHOR_LINE_RE = re.compile(r"^[A-Z][a-z]+ [A-Z][a-z]+(?:,\s*[A-Z][a-z]+ [A-Z][a-z]+)*$")
_NUMERIC_LINE_RE = re.compile(r"^\d+$")
_SKIP_TITLE_WORDS = ("abstract", "introduction")

_TITLE_SCAN_LINES = 5
_AUTHOR_SCAN_LINES = 10


def _non_empty_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def guess_title(text: str) -> str | None:
    """First early line that looks like a heading rather than a page number."""
    for line in _non_empty_lines(text)[:_TITLE_SCAN_LINES]:
        lowered = line.lower()
        if not 10 < len(line) < 200:
            continue
        if _NUMERIC_LINE_RE.match(line):
            continue
        if any(word in lowered for word in _SKIP_TITLE_WORDS):
            continue
        return line
    return None


def guess_authors(text: str) -> str | None:
    """An early ``First Last, First Last`` line or one mentioning et al."""
    for line in _non_empty_lines(text)[:_AUTHOR_SCAN_LINES]:
        if _AUTHOR_LINE_RE.match(line) or "et al." in line:
            return line
    return None


def metadata_value(metadata: Mapping[str, object] | None, *keys: str) -> str | None:
    """First non-blank string among *keys* in a PDF info dictionary."""
    if not metadata:
        return None
    for key in keys:
        value = metadata.get(key)
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="ignore")
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None
