"""Code-Point Open style postcode source reader."""

from __future__ import annotations

import csv
import math
from pathlib import Path
from typing import Iterator

from zonemap.common.constants import (
    CODEPOINT_EASTING_COLUMN,
    CODEPOINT_NORTHING_COLUMN,
    CODEPOINT_POSTCODE_COLUMN,
)
from zonemap.common.errors import StageError
from zonemap.common.models import PostcodeRecord, ReadStats, SourceReadResult
from zonemap.common.postcode import matches_prefix

_MIN_COLUMNS = max(CODEPOINT_POSTCODE_COLUMN, CODEPOINT_EASTING_COLUMN, CODEPOINT_NORTHING_COLUMN) + 1


def _finite_float(value: str) -> float | None:
    # Digit-group underscores are Python literal syntax, not data.
    if "_" in value:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _parse_line(line: str) -> list[str] | None:
    # Lines are parsed one at a time so a bad quote cannot swallow its neighbours.
    try:
        row = next(csv.reader([line], strict=True, skipinitialspace=True), None)
    except csv.Error:
        try:
            row = next(csv.reader([line], quoting=csv.QUOTE_NONE, skipinitialspace=True), None)
        except csv.Error:
            return None
        row = [field.replace('"', "") for field in row] if row is not None else None
    if row is None:
        return None
    return [field.strip() for field in row]


def _iter_lines(path: Path) -> Iterator[str]:
    with path.open("r", encoding="utf-8-sig", errors="replace", newline="") as f:
        for line in f:
            line = line.rstrip("\r\n")
            if line.strip():
                yield line


def read_postcode_source(path: Path, prefix: str) -> SourceReadResult:
    """Read the headerless postcode CSV, keeping rows under ``prefix``.

    Malformed rows and rows with non-finite coordinates are dropped and only
    counted in the returned stats.
    """
    if not path.is_file():
        raise StageError(f"Postcode source not found: {path}")

    stats = ReadStats()
    records: list[PostcodeRecord] = []

    for line in _iter_lines(path):
        stats.rows_read += 1
        row = _parse_line(line)
        if row is None or len(row) < _MIN_COLUMNS or not row[CODEPOINT_POSTCODE_COLUMN]:
            stats.malformed_rows += 1
            continue

        postcode = row[CODEPOINT_POSTCODE_COLUMN]
        if not matches_prefix(postcode, prefix):
            stats.outside_prefix += 1
            continue

        easting = _finite_float(row[CODEPOINT_EASTING_COLUMN])
        northing = _finite_float(row[CODEPOINT_NORTHING_COLUMN])
        if easting is None or northing is None:
            stats.invalid_coordinates += 1
            continue

        records.append(PostcodeRecord(postcode=postcode, easting=easting, northing=northing))

    stats.rows_kept = len(records)
    return SourceReadResult(records=records, stats=stats)
