"""Central error types used across the application."""

from __future__ import annotations


class ConversionError(RuntimeError):
    """Base error for failures while turning raw track data into GPX."""


class InvalidInputFormat(ConversionError):
    """Raised when raw input is not JSON, not an array, or has the wrong structure."""


class InvalidActivityLink(InvalidInputFormat):
    """Raised when a link does not contain a YAMAP activity id."""


class EmptyOrMissingTrackData(ConversionError):
    """Raised when the input holds zero points or the points array is absent."""


class MalformedTrackpoint(ConversionError):
    """Raised when a single record cannot be normalized; fatal to the batch."""


class YamapAPIError(RuntimeError):
    """Base error for YAMAP API failures."""


class YamapPermissionError(YamapAPIError):
    """Raised when the API refuses access to an activity (401/403)."""


class YamapResourceNotFoundError(YamapAPIError):
    """Raised when an activity or its track does not exist."""


__all__ = [
    "ConversionError",
    "InvalidInputFormat",
    "InvalidActivityLink",
    "EmptyOrMissingTrackData",
    "MalformedTrackpoint",
    "YamapAPIError",
    "YamapPermissionError",
    "YamapResourceNotFoundError",
]
