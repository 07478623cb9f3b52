"""General utility helpers shared across modules."""

from __future__ import annotations

import json
import re
from typing import Any, Sequence

from .config import DEFAULT_TRACK_NAME, PREVIEW_SAMPLE_SIZE
from .models import SOURCE_YAMAP

GPX_EXTENSION = ".gpx"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9\-_\s]")

_SOURCE_LABELS = {SOURCE_YAMAP: "YAMAP API"}


def sanitize_filename(name: str | None) -> str:
    """Replace characters outside ``[a-zA-Z0-9-_ ]`` with ``_`` and trim."""

    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", name or "").strip()
    if not cleaned:
        cleaned = _UNSAFE_FILENAME_CHARS.sub("_", DEFAULT_TRACK_NAME).strip()
    return cleaned


def gpx_filename(name: str | None) -> str:
    return f"{sanitize_filename(name)}{GPX_EXTENSION}"


def format_preview(
    points: Sequence[Any], source: str, sample_size: int = PREVIEW_SAMPLE_SIZE
) -> str:
    """Describe the first few raw records of a loaded dataset."""

    sample = list(points[:sample_size])
    source_text = _SOURCE_LABELS.get(source, "uploaded file")
    header = (
        f"Sample trackpoints from {source_text} "
        f"(showing first {len(sample)} of {len(points)}):"
    )
    body = json.dumps(sample, indent=2, ensure_ascii=False)
    return f"{header}\n\n{body}"
