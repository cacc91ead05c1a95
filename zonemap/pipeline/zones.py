"""Zone polygon loading and zone key resolution."""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any

import shapely
from shapely.errors import GEOSException
from shapely.geometry import shape

from zonemap.common.constants import POLYGONAL_GEOMETRY_TYPES, ZONE_KEY_PROPERTIES
from zonemap.common.errors import ConfigurationError
from zonemap.common.fs import read_json
from zonemap.common.logging import log_warning
from zonemap.common.models import FallbackKey, FoundKey, KeyResolution, ZoneDefinition


def _usable_key(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def resolve_zone_key(properties: dict[str, Any], index: int) -> KeyResolution:
    """Look up the zone key in property order, falling back to the position.

    ``index`` is the zero-based position among the features that survived
    filtering, so the fallback key is ``zone_<index + 1>``.
    """
    for name in ZONE_KEY_PROPERTIES:
        key = _usable_key(properties.get(name))
        if key is not None:
            return FoundKey(key=key, source_property=name)
    return FallbackKey(index=index)


def _as_features(payload: Any) -> list[Any]:
    if isinstance(payload, dict) and payload.get("type") == "FeatureCollection":
        features = payload.get("features")
        return features if isinstance(features, list) else []
    return [payload]


def _is_usable_feature(feature: Any) -> bool:
    if not isinstance(feature, dict):
        return False
    geometry = feature.get("geometry")
    if not isinstance(geometry, dict) or not geometry.get("type"):
        return False
    return isinstance(feature.get("properties"), dict)


def _read_zone_payload(path: Path) -> Any:
    if not path.exists():
        raise ConfigurationError(f"Zones file not found: {path}")
    try:
        return read_json(path)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Zones file is not valid GeoJSON: {path}") from exc


def _build_geometry(geometry: dict, zone_key: str):
    geometry_type = geometry.get("type")
    if geometry_type not in POLYGONAL_GEOMETRY_TYPES:
        raise ConfigurationError(f"Zone {zone_key} has unsupported geometry type {geometry_type}")
    try:
        polygon = shape(geometry)
    except (GEOSException, ValueError, TypeError, IndexError, AttributeError) as exc:
        raise ConfigurationError(f"Zone {zone_key} has malformed coordinates") from exc
    # Prepared in place so repeated containment tests reuse the spatial index.
    shapely.prepare(polygon)
    return polygon


def load_zones(path: Path, logger: logging.Logger | None = None) -> list[ZoneDefinition]:
    features = [feature for feature in _as_features(_read_zone_payload(path)) if _is_usable_feature(feature)]
    if not features:
        raise ConfigurationError(f"No polygon features found in zones file: {path}")

    zones: list[ZoneDefinition] = []
    for index, feature in enumerate(features):
        resolution = resolve_zone_key(feature["properties"], index)
        zone_key = _usable_key(resolution.key)
        if zone_key is None:
            raise ConfigurationError(f"Zone feature {index} is missing a zone_key property")

        geometry = _build_geometry(feature["geometry"], zone_key)
        if logger is not None:
            if isinstance(resolution, FallbackKey):
                log_warning(
                    logger,
                    f"zone feature {index} has no key property; using {zone_key}",
                    stage="load-zones",
                    event="ZONE_KEY_FALLBACK",
                    status="warning",
                )
            if not geometry.is_valid:
                log_warning(
                    logger,
                    f"zone {zone_key} geometry is not valid; containment near its edges may be unreliable",
                    stage="load-zones",
                    event="ZONE_GEOMETRY_INVALID",
                    status="warning",
                )
        zones.append(ZoneDefinition(zone_key=zone_key, geometry=geometry, resolution=resolution))

    key_counts = Counter(zone.zone_key for zone in zones)
    duplicates = sorted(key for key, count in key_counts.items() if count > 1)
    if duplicates:
        raise ConfigurationError(f"Duplicate zone keys: {', '.join(duplicates)}")

    return zones
