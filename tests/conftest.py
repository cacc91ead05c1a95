from __future__ import annotations

import json
from pathlib import Path

import pytest
from pyproj import CRS, Transformer

from zonemap.common.constants import BNG_PROJ4


def square(min_lon: float, min_lat: float, max_lon: float, max_lat: float) -> list:
    return [
        [
            [min_lon, min_lat],
            [max_lon, min_lat],
            [max_lon, max_lat],
            [min_lon, max_lat],
            [min_lon, min_lat],
        ]
    ]


def polygon_feature(coordinates: list, **properties) -> dict:
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "Polygon", "coordinates": coordinates},
    }


@pytest.fixture
def to_grid():
    transformer = Transformer.from_crs(CRS.from_epsg(4326), CRS.from_proj4(BNG_PROJ4), always_xy=True)

    def _to_grid(lon: float, lat: float) -> tuple[float, float]:
        return transformer.transform(lon, lat)

    return _to_grid


@pytest.fixture
def write_geojson(tmp_path: Path):
    def _write(features: list[dict], name: str = "zones.geojson") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps({"type": "FeatureCollection", "features": features}), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def example_inputs(tmp_path: Path, write_geojson, to_grid):
    """One Z1 square near Heysham plus a postcode inside it and one outside."""
    zones_path = write_geojson([polygon_feature(square(-3.0, 54.0, -2.9, 54.1), zone_key="Z1")])

    inside_e, inside_n = to_grid(-2.95, 54.05)
    outside_e, outside_n = to_grid(-2.5, 54.05)
    codepoint_path = tmp_path / "LA.csv"
    codepoint_path.write_text(
        "\n".join(
            [
                f'"LA32FW",10,{inside_e:.2f},{inside_n:.2f},"E92000001","E19000001"',
                f'"LA3 2QQ",10,{outside_e:.2f},{outside_n:.2f},"E92000001","E19000001"',
                f'"LA1 1AA",10,{inside_e:.2f},{inside_n:.2f},"E92000001","E19000001"',
                '"LA3 2ZZ",10,,,"E92000001","E19000001"',
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    return zones_path, codepoint_path


@pytest.fixture
def make_square():
    return square


@pytest.fixture
def make_feature():
    return polygon_feature
