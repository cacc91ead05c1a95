"""Run report aggregation."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from zonemap.common.fs import write_json
from zonemap.common.models import ClassificationResult, FallbackKey, ReadStats, ZoneDefinition


def _zone_entries(zones: Sequence[ZoneDefinition], zone_counts: dict[str, int]) -> list[dict]:
    entries = []
    for position, zone in enumerate(zones):
        resolution = zone.resolution
        entries.append(
            {
                "zone_key": zone.zone_key,
                "load_order": position,
                "key_source": "fallback" if isinstance(resolution, FallbackKey) else resolution.source_property,
                "matched_postcodes": zone_counts.get(zone.zone_key, 0),
            }
        )
    return entries


def build_run_report(
    *,
    run_id: str,
    prefix: str,
    zones_path: Path,
    codepoint_path: Path,
    out_path: Path,
    zones: Sequence[ZoneDefinition],
    read_stats: ReadStats,
    classification: ClassificationResult,
) -> dict:
    rows_written = len(classification.rows)
    warnings: list[str] = []
    if any(isinstance(zone.resolution, FallbackKey) for zone in zones):
        warnings.append("ZONE_KEY_FALLBACK_USED")
    if read_stats.dropped:
        warnings.append("SOURCE_ROWS_DROPPED")
    if rows_written == 0:
        warnings.append("NO_POSTCODES_FOR_PREFIX")

    return {
        "run_id": run_id,
        "status": "success",
        "inputs": {
            "zones_path": str(zones_path),
            "codepoint_path": str(codepoint_path),
            "prefix": prefix,
        },
        "output_path": str(out_path),
        "counts": {
            "zones": len(zones),
            "rows_written": rows_written,
            "matched": rows_written - classification.unmatched,
            "unmatched": classification.unmatched,
            "source": read_stats.to_dict(),
        },
        "zones": _zone_entries(zones, classification.zone_counts),
        "warnings": warnings,
    }


def write_run_report(report_path: Path, payload: dict) -> Path:
    write_json(report_path, payload)
    return report_path
