"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class FoundKey:
    key: str
    source_property: str


@dataclass(frozen=True)
class FallbackKey:
    index: int

    @property
    def key(self) -> str:
        return f"zone_{self.index + 1}"


KeyResolution = Union[FoundKey, FallbackKey]


@dataclass(frozen=True)
class ZoneDefinition:
    zone_key: str
    geometry: Any
    resolution: KeyResolution


@dataclass(frozen=True)
class PostcodeRecord:
    postcode: str
    easting: float
    northing: float


@dataclass(frozen=True)
class ClassifiedPostcode:
    postcode: str
    zone_key: str
    lat: float
    lng: float

    @property
    def matched(self) -> bool:
        return self.zone_key != ""


@dataclass
class ReadStats:
    rows_read: int = 0
    malformed_rows: int = 0
    outside_prefix: int = 0
    invalid_coordinates: int = 0
    rows_kept: int = 0

    @property
    def dropped(self) -> int:
        return self.malformed_rows + self.invalid_coordinates

    def to_dict(self) -> dict[str, int]:
        payload = asdict(self)
        payload["dropped"] = self.dropped
        return payload


@dataclass(frozen=True)
class SourceReadResult:
    records: list[PostcodeRecord]
    stats: ReadStats


@dataclass(frozen=True)
class ClassificationResult:
    rows: list[ClassifiedPostcode]
    unmatched: int
    zone_counts: dict[str, int] = field(default_factory=dict)
