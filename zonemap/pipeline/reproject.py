"""British National Grid to WGS84 reprojection."""

from __future__ import annotations

import threading
from typing import Callable

from pyproj import CRS, Transformer

from zonemap.common.constants import BNG_PROJ4, WGS84_EPSG

Reproject = Callable[[float, float], tuple[float, float]]

# pyproj transformers must not be shared across threads.
_local = threading.local()


def bng_to_wgs84_transformer() -> Transformer:
    transformer = getattr(_local, "transformer", None)
    if transformer is None:
        transformer = Transformer.from_crs(CRS.from_proj4(BNG_PROJ4), CRS.from_epsg(WGS84_EPSG), always_xy=True)
        _local.transformer = transformer
    return transformer


def reproject_bng(easting: float, northing: float) -> tuple[float, float]:
    """Return ``(lon, lat)`` for an OSGB36 easting/northing pair, unrounded."""
    lon, lat = bng_to_wgs84_transformer().transform(easting, northing)
    return lon, lat
