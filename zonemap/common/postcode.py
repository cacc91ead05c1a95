"""UK postcode normalisation and display formatting."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalise_postcode_no_space(raw: str | None) -> str:
    if raw is None:
        return ""
    return _WHITESPACE_RE.sub("", raw).upper()


def format_uk_postcode(raw: str | None) -> str:
    """Render a postcode with a single space before the inward code.

    Codes of three characters or fewer have no inward part and are returned
    normalised but unspaced.
    """
    cleaned = normalise_postcode_no_space(raw)
    if len(cleaned) <= 3:
        return cleaned
    return f"{cleaned[:-3]} {cleaned[-3:]}"


def matches_prefix(raw: str | None, prefix: str) -> bool:
    return normalise_postcode_no_space(raw).startswith(normalise_postcode_no_space(prefix))
