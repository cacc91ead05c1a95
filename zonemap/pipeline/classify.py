"""Point-in-zone classification."""

from __future__ import annotations

from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Sequence

from shapely.geometry import Point

from zonemap.common.models import ClassificationResult, ClassifiedPostcode, PostcodeRecord, ZoneDefinition
from zonemap.common.postcode import format_uk_postcode
from zonemap.pipeline.reproject import Reproject, reproject_bng

Contains = Callable[[Any, float, float], bool]


def geometry_covers(geometry: Any, lon: float, lat: float) -> bool:
    """True when the point is inside the geometry or on its boundary.

    Holes are excluded, and a point on a hole's ring counts as covered.
    """
    return geometry.covers(Point(lon, lat))


def find_zone(
    zones: Sequence[ZoneDefinition],
    lon: float,
    lat: float,
    contains: Contains = geometry_covers,
) -> str | None:
    for zone in zones:
        if contains(zone.geometry, lon, lat):
            return zone.zone_key
    return None


def classify_record(
    record: PostcodeRecord,
    zones: Sequence[ZoneDefinition],
    *,
    reproject: Reproject = reproject_bng,
    contains: Contains = geometry_covers,
) -> ClassifiedPostcode:
    lon, lat = reproject(record.easting, record.northing)
    zone_key = find_zone(zones, lon, lat, contains)
    return ClassifiedPostcode(
        postcode=format_uk_postcode(record.postcode),
        zone_key=zone_key or "",
        lat=lat,
        lng=lon,
    )


def classify_records(
    records: Sequence[PostcodeRecord],
    zones: Sequence[ZoneDefinition],
    *,
    reproject: Reproject = reproject_bng,
    contains: Contains = geometry_covers,
    workers: int = 1,
) -> ClassificationResult:
    """Classify every record against ``zones``; output order follows input order."""

    def _classify(record: PostcodeRecord) -> ClassifiedPostcode:
        return classify_record(record, zones, reproject=reproject, contains=contains)

    if workers > 1 and len(records) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            rows = list(executor.map(_classify, records))
    else:
        rows = [_classify(record) for record in records]

    matched = Counter(row.zone_key for row in rows if row.matched)
    zone_counts = {zone.zone_key: matched.get(zone.zone_key, 0) for zone in zones}
    unmatched = sum(1 for row in rows if not row.matched)
    return ClassificationResult(rows=rows, unmatched=unmatched, zone_counts=zone_counts)
