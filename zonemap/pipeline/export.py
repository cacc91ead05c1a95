"""Postcode to zone CSV export."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from zonemap.common.constants import COORDINATE_DECIMALS, OUTPUT_HEADERS
from zonemap.common.fs import write_csv_atomic
from zonemap.common.models import ClassifiedPostcode


def format_coordinate(value: float) -> str:
    return f"{value:.{COORDINATE_DECIMALS}f}"


def _serialize_row(row: ClassifiedPostcode) -> dict:
    return {
        "postcode": row.postcode,
        "zone_key": row.zone_key,
        "lat": format_coordinate(row.lat),
        "lng": format_coordinate(row.lng),
    }


def write_zone_map_csv(out_path: Path, rows: Iterable[ClassifiedPostcode]) -> Path:
    write_csv_atomic(out_path, OUTPUT_HEADERS, (_serialize_row(row) for row in rows))
    return out_path
