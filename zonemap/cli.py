"""CLI entrypoint for the postcode to zone assignment pipeline."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from zonemap.common.config_loader import load_run_config, resolve_settings
from zonemap.common.constants import DEFAULT_CONFIG_PATH, EXIT_HARD_FAIL, EXIT_SUCCESS
from zonemap.common.errors import PipelineError
from zonemap.common.logging import build_logger, log_event
from zonemap.common.time_utils import generate_run_id
from zonemap.pipeline.assign import AssignmentSummary, run_assignment


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH)
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--zones", default=None, help="zone polygon GeoJSON")
    parser.add_argument("--codepoint", default=None, help="headerless Code-Point Open CSV")
    parser.add_argument("--prefix", default=None, help="postcode prefix, case and spaces ignored")
    parser.add_argument("--out", default=None, help="output CSV path")
    parser.add_argument("--report", default=None, help="optional JSON run report path")
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None)
    return parser.parse_args(argv)


def print_summary(summary: AssignmentSummary) -> None:
    print(f"Rows processed: {summary.rows_written}")
    print(f"Unmatched (outside all polygons): {summary.unmatched}")
    print(f"Dropped source rows: {summary.dropped_rows}")
    print(f"Output written to: {summary.out_path}")
    if summary.report_path is not None:
        print(f"Report written to: {summary.report_path}")


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    logger = build_logger(run_id, level=args.log_level, log_path=Path(args.log_file) if args.log_file else None)

    try:
        cfg = load_run_config(
            Path(args.config) if args.config else None,
            Path(args.overlay_config) if args.overlay_config else None,
        )
        settings = resolve_settings(
            cfg,
            {
                "zones_path": args.zones,
                "codepoint_path": args.codepoint,
                "prefix": args.prefix,
                "out_path": args.out,
                "report_path": args.report,
                "workers": args.workers,
            },
        )
        summary = run_assignment(settings, logger, run_id)
    except PipelineError as exc:
        log_event(
            logger,
            f"run failed: {exc}",
            run_id=run_id,
            event="STAGE_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL
    except Exception as exc:
        log_event(
            logger,
            f"unexpected failure: {exc!r}",
            run_id=run_id,
            event="STAGE_FAIL",
            status="error",
            error_code="UNEXPECTED_ERROR",
        )
        print(f"unexpected error: {exc!r}", file=sys.stderr)
        return EXIT_HARD_FAIL

    print_summary(summary)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except Exception as exc:
        print(f"unexpected error: {exc!r}", file=sys.stderr)
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
