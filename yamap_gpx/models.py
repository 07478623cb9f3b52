from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence, Tuple

from .config import DEFAULT_TRACK_NAME

RawPoint = Mapping[str, Any]

SOURCE_YAMAP = "yamap"
SOURCE_FILE = "file"


@dataclass(frozen=True)
class Trackpoint:
    latitude: float
    longitude: float
    time: datetime
    elevation: float = 0.0
    horizontal_speed: Optional[float] = None
    vertical_speed: Optional[float] = None
    # True when the timestamp is the wall-clock fallback, not source data
    time_is_fallback: bool = False

    @property
    def has_speed(self) -> bool:
        return self.horizontal_speed is not None or self.vertical_speed is not None


@dataclass(frozen=True)
class Track:
    points: Tuple[Trackpoint, ...]
    name: str = DEFAULT_TRACK_NAME
    description: str = ""

    def __post_init__(self) -> None:
        # Empty or missing names fall back to the default on every construction
        object.__setattr__(self, "name", self.name or DEFAULT_TRACK_NAME)
        object.__setattr__(self, "description", self.description or "")

    @property
    def fallback_time_count(self) -> int:
        return sum(1 for point in self.points if point.time_is_fallback)


@dataclass(frozen=True)
class ConversionRequest:
    raw_points: Sequence[RawPoint]
    name: Optional[str] = None
    description: Optional[str] = None
    source: str = SOURCE_FILE


@dataclass(frozen=True)
class ConversionResult:
    gpx: str
    filename: str
    track: Track
    source: str = SOURCE_FILE
    generated_at: Optional[datetime] = None

    @property
    def point_count(self) -> int:
        return len(self.track.points)

    @property
    def fallback_time_count(self) -> int:
        return self.track.fallback_time_count
