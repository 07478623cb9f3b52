"""Fetch regularized activity tracks from the YAMAP API."""

from __future__ import annotations

import logging
import re
import threading
from typing import Any, List, Optional

import requests
from cachetools import TTLCache

from ..config import (
    REQUEST_TIMEOUT,
    TRACK_CACHE_SIZE,
    TRACK_CACHE_TTL_SECONDS,
    YAMAP_BASE_URL,
)
from ..errors import InvalidActivityLink, YamapAPIError
from ..ingest import extract_points, validate_yamap_points
from ..models import RawPoint
from .response_handling import classify_response_status
from .session import get_default_session

LOGGER = logging.getLogger(__name__)

_ACTIVITY_LINK_RE = re.compile(r"yamap\.com/activities/(\d+)")
_ACTIVITY_ID_RE = re.compile(r"\d+")


def extract_activity_id(link: str) -> str:
    """Return the numeric activity id from a YAMAP activity link.

    Raises:
        InvalidActivityLink: If ``link`` does not reference an activity.
    """
    match = _ACTIVITY_LINK_RE.search(link or "")
    if not match:
        raise InvalidActivityLink(
            "Invalid YAMAP URL. Please use format: "
            "https://yamap.com/activities/39755763"
        )
    return match.group(1)


def resolve_activity_id(link_or_id: str | int) -> str:
    """Accept either a bare activity id or an activity link."""
    text = str(link_or_id).strip()
    if _ACTIVITY_ID_RE.fullmatch(text):
        return text
    return extract_activity_id(text)


class TrackAPI:
    """Fetches ``activity_regularized_track`` payloads with an in-memory cache."""

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        base_url: str = YAMAP_BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
        cache_size: int = TRACK_CACHE_SIZE,
        cache_ttl: int = TRACK_CACHE_TTL_SECONDS,
    ) -> None:
        self._session = session or get_default_session()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._cache: Optional[TTLCache[str, Any]] = (
            TTLCache(maxsize=cache_size, ttl=cache_ttl) if cache_size > 0 else None
        )
        self._cache_lock = threading.Lock()

    def track_url(self, activity_id: str) -> str:
        return f"{self._base_url}/activities/{activity_id}/activity_regularized_track"

    def fetch_activity_track(self, activity_id: str | int) -> Any:
        """Return the raw JSON payload for an activity's track.

        Raises:
            YamapAPIError: On transport failures, error statuses, or a body
                that is not JSON.
        """
        key = str(activity_id)
        cached = self._cache_get(key)
        if cached is not None:
            LOGGER.debug("Track cache hit activity=%s", key)
            return cached

        url = self.track_url(key)
        context = f"Activity {key} track"
        LOGGER.debug("GET %s", url)
        try:
            response = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            message = f"{context} network error: {exc.__class__.__name__}"
            LOGGER.error(message)
            raise YamapAPIError(message) from exc

        error = classify_response_status(response, context)
        if error is not None:
            raise error

        try:
            payload = response.json()
        except ValueError as exc:
            message = f"{context} returned a non-JSON body"
            LOGGER.error(message)
            raise YamapAPIError(message) from exc

        self._cache_put(key, payload)
        return payload

    def fetch_track_points(self, link_or_id: str | int) -> List[RawPoint]:
        """Fetch, unwrap and validate the raw points of an activity."""
        activity_id = resolve_activity_id(link_or_id)
        LOGGER.info("Fetching activity data for activity %s", activity_id)
        points = extract_points(self.fetch_activity_track(activity_id))
        validate_yamap_points(points)
        LOGGER.info(
            "Successfully loaded %d trackpoints from activity %s",
            len(points),
            activity_id,
        )
        return points

    def clear_cache(self) -> None:
        if self._cache is None:
            return
        with self._cache_lock:
            self._cache.clear()

    def _cache_get(self, key: str) -> Any:
        if self._cache is None:
            return None
        with self._cache_lock:
            return self._cache.get(key)

    def _cache_put(self, key: str, payload: Any) -> None:
        if self._cache is None:
            return
        with self._cache_lock:
            self._cache[key] = payload


_DEFAULT_TRACK_API: Optional[TrackAPI] = None


def get_default_track_api() -> TrackAPI:
    global _DEFAULT_TRACK_API
    if _DEFAULT_TRACK_API is None:
        _DEFAULT_TRACK_API = TrackAPI()
    return _DEFAULT_TRACK_API


def fetch_track_points(link_or_id: str | int) -> List[RawPoint]:
    """Module-level wrapper around the default :class:`TrackAPI`."""
    return get_default_track_api().fetch_track_points(link_or_id)
