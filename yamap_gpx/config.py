"""Central configuration for the YAMAP to GPX converter.

All values are constants imported by the rest of the package. Adjust as needed
for your environment. Overrides are read from environment variables (optionally
via a local `.env`).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env from the current directory or any parent folder.
load_dotenv()


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------
# Directory (absolute or relative) where generated GPX files are written.
GPX_OUTPUT_DIR = os.getenv("GPX_OUTPUT_DIR", "gpx_output")

# Value of the <gpx creator="..."> attribute.
GPX_CREATOR = os.getenv("GPX_CREATOR", "YAMAP to GPX Converter")

# Track name used when the caller supplies none. Also the filename fallback.
DEFAULT_TRACK_NAME = os.getenv("DEFAULT_TRACK_NAME", "GPS Track")

# Number of raw records shown in the data preview.
PREVIEW_SAMPLE_SIZE = _env_int("PREVIEW_SAMPLE_SIZE", 3)

# Print the data preview before converting (CLI default).
PREVIEW_ENABLED = _env_bool("PREVIEW_ENABLED", True)


# ---------------------------------------------------------------------------
# YAMAP settings
# ---------------------------------------------------------------------------
# Base YAMAP API URL.
YAMAP_BASE_URL = os.getenv("YAMAP_BASE_URL", "https://api.yamap.com/v4")

# Request timeout in seconds.
REQUEST_TIMEOUT = _env_float("REQUEST_TIMEOUT", 15.0)

# HTTP session pool sizes.
HTTP_POOL_CONNECTIONS = _env_int("HTTP_POOL_CONNECTIONS", 4)
HTTP_POOL_MAXSIZE = _env_int("HTTP_POOL_MAXSIZE", 4)

# Retries for connection failures and 5xx responses (handled by urllib3).
HTTP_MAX_RETRIES = _env_int("HTTP_MAX_RETRIES", 3)
HTTP_BACKOFF_FACTOR = _env_float("HTTP_BACKOFF_FACTOR", 1.0)

# Raw activity payloads kept in memory so a preview followed by a conversion
# does not fetch twice. Set the size to 0 to disable.
TRACK_CACHE_SIZE = _env_int("TRACK_CACHE_SIZE", 32)
TRACK_CACHE_TTL_SECONDS = _env_int("TRACK_CACHE_TTL_SECONDS", 600)
