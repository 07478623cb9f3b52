"""YAMAP activity API client (session, response handling, track fetch)."""

from .response_handling import classify_response_status, extract_error  # noqa: F401
from .session import create_default_session, get_default_session  # noqa: F401
from .tracks import (  # noqa: F401
    TrackAPI,
    extract_activity_id,
    fetch_track_points,
    get_default_track_api,
    resolve_activity_id,
)
