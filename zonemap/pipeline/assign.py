"""Postcode to zone assignment run orchestration."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from zonemap.common.config_loader import RunSettings
from zonemap.common.logging import log_event
from zonemap.common.models import ReadStats
from zonemap.common.time_utils import elapsed_ms
from zonemap.pipeline.classify import classify_records
from zonemap.pipeline.codepoint import read_postcode_source
from zonemap.pipeline.export import write_zone_map_csv
from zonemap.pipeline.reports import build_run_report, write_run_report
from zonemap.pipeline.zones import load_zones


@dataclass(frozen=True)
class AssignmentSummary:
    out_path: Path
    rows_written: int
    unmatched: int
    read_stats: ReadStats
    zone_counts: dict[str, int] = field(default_factory=dict)
    report_path: Path | None = None

    @property
    def dropped_rows(self) -> int:
        return self.read_stats.dropped


def run_assignment(settings: RunSettings, logger: logging.Logger, run_id: str) -> AssignmentSummary:
    """Load zones, read and filter postcodes, classify them and write the table.

    Any ``PipelineError`` raised here aborts the run before the output file is
    replaced.
    """
    started = time.monotonic()
    log_event(logger, "stage start", run_id=run_id, stage="load-zones", event="STAGE_START", status="ok")
    zones = load_zones(settings.zones_path, logger=logger)
    log_event(
        logger,
        f"loaded {len(zones)} zones",
        run_id=run_id,
        stage="load-zones",
        source=str(settings.zones_path),
        event="STAGE_END",
        status="ok",
        rows_out=len(zones),
        duration_ms=elapsed_ms(started),
    )

    started = time.monotonic()
    log_event(logger, "stage start", run_id=run_id, stage="read-source", event="STAGE_START", status="ok")
    source = read_postcode_source(settings.codepoint_path, settings.prefix)
    stats = source.stats
    log_event(
        logger,
        f"kept {stats.rows_kept} postcodes for prefix {settings.prefix}; "
        f"dropped {stats.malformed_rows} malformed and {stats.invalid_coordinates} with invalid coordinates",
        run_id=run_id,
        stage="read-source",
        source=str(settings.codepoint_path),
        event="STAGE_END",
        status="ok",
        rows_in=stats.rows_read,
        rows_out=stats.rows_kept,
        duration_ms=elapsed_ms(started),
    )

    started = time.monotonic()
    log_event(logger, "stage start", run_id=run_id, stage="classify", event="STAGE_START", status="ok")
    classification = classify_records(source.records, zones, workers=settings.workers)
    log_event(
        logger,
        f"{classification.unmatched} postcodes outside all zones",
        run_id=run_id,
        stage="classify",
        event="STAGE_END",
        status="ok",
        rows_in=len(source.records),
        rows_out=len(classification.rows),
        duration_ms=elapsed_ms(started),
    )

    started = time.monotonic()
    log_event(logger, "stage start", run_id=run_id, stage="write", event="STAGE_START", status="ok")
    out_path = write_zone_map_csv(settings.out_path, classification.rows)
    log_event(
        logger,
        f"wrote {out_path}",
        run_id=run_id,
        stage="write",
        event="STAGE_END",
        status="ok",
        rows_out=len(classification.rows),
        duration_ms=elapsed_ms(started),
    )

    report_path = None
    if settings.report_path is not None:
        report = build_run_report(
            run_id=run_id,
            prefix=settings.prefix,
            zones_path=settings.zones_path,
            codepoint_path=settings.codepoint_path,
            out_path=out_path,
            zones=zones,
            read_stats=stats,
            classification=classification,
        )
        report_path = write_run_report(settings.report_path, report)

    return AssignmentSummary(
        out_path=out_path,
        rows_written=len(classification.rows),
        unmatched=classification.unmatched,
        read_stats=stats,
        zone_counts=classification.zone_counts,
        report_path=report_path,
    )
