"""YAMAP activity to GPX converter package."""

from .converter import build_track, convert, write_gpx_file
from .errors import (
    ConversionError,
    EmptyOrMissingTrackData,
    InvalidInputFormat,
    MalformedTrackpoint,
)
from .gpx_writer import serialize
from .main import main
from .models import ConversionRequest, ConversionResult, Track, Trackpoint
from .normalizer import normalize, normalize_all

__all__ = [
    "main",
    "build_track",
    "convert",
    "write_gpx_file",
    "serialize",
    "normalize",
    "normalize_all",
    "ConversionRequest",
    "ConversionResult",
    "Track",
    "Trackpoint",
    "ConversionError",
    "EmptyOrMissingTrackData",
    "InvalidInputFormat",
    "MalformedTrackpoint",
]
