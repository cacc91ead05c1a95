import json
from pathlib import Path

from shapely.geometry import box

from zonemap.common.models import (
    ClassificationResult,
    ClassifiedPostcode,
    FallbackKey,
    FoundKey,
    ReadStats,
    ZoneDefinition,
)
from zonemap.pipeline.reports import build_run_report, write_run_report


def _report(zones, stats, classification):
    return build_run_report(
        run_id="run-test",
        prefix="LA32",
        zones_path=Path("zones.geojson"),
        codepoint_path=Path("LA.csv"),
        out_path=Path("out.csv"),
        zones=zones,
        read_stats=stats,
        classification=classification,
    )


def test_build_run_report_counts_and_zone_sources():
    zones = [
        ZoneDefinition("Z1", box(0, 0, 1, 1), FoundKey("Z1", "zone_key")),
        ZoneDefinition("zone_2", box(1, 0, 2, 1), FallbackKey(1)),
    ]
    stats = ReadStats(rows_read=10, malformed_rows=1, outside_prefix=5, invalid_coordinates=1, rows_kept=3)
    classification = ClassificationResult(
        rows=[
            ClassifiedPostcode("LA3 2AA", "Z1", 0.5, 0.5),
            ClassifiedPostcode("LA3 2AB", "Z1", 0.5, 0.5),
            ClassifiedPostcode("LA3 2AC", "", 9, 9),
        ],
        unmatched=1,
        zone_counts={"Z1": 2, "zone_2": 0},
    )

    report = _report(zones, stats, classification)

    assert report["counts"]["rows_written"] == 3
    assert report["counts"]["matched"] == 2
    assert report["counts"]["unmatched"] == 1
    assert report["counts"]["source"]["dropped"] == 2
    assert report["zones"] == [
        {"zone_key": "Z1", "load_order": 0, "key_source": "zone_key", "matched_postcodes": 2},
        {"zone_key": "zone_2", "load_order": 1, "key_source": "fallback", "matched_postcodes": 0},
    ]
    assert report["warnings"] == ["ZONE_KEY_FALLBACK_USED", "SOURCE_ROWS_DROPPED"]
    assert report["status"] == "success"


def test_build_run_report_clean_run_is_success():
    zones = [ZoneDefinition("Z1", box(0, 0, 1, 1), FoundKey("Z1", "name"))]
    classification = ClassificationResult(rows=[ClassifiedPostcode("LA3 2AA", "Z1", 0.5, 0.5)], unmatched=0, zone_counts={"Z1": 1})

    report = _report(zones, ReadStats(rows_read=1, rows_kept=1), classification)

    assert report["status"] == "success"
    assert report["warnings"] == []


def test_write_run_report_is_sorted_json(tmp_path: Path):
    path = write_run_report(tmp_path / "reports" / "run.json", {"b": 1, "a": 2})
    text = path.read_text(encoding="utf-8")
    assert json.loads(text) == {"a": 2, "b": 1}
    assert text.index('"a"') < text.index('"b"')
