"""Shared HTTP response helpers for YAMAP API interactions."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from ..errors import (
    YamapAPIError,
    YamapPermissionError,
    YamapResourceNotFoundError,
)

LOGGER = logging.getLogger(__name__)

__all__ = [
    "classify_response_status",
    "extract_error",
]


def classify_response_status(
    response: requests.Response, context: str
) -> Optional[YamapAPIError]:
    """Return the error matching a non-success status, or None when OK."""

    status = response.status_code
    if status < 400:
        return None

    detail = extract_error(response)

    def with_detail(message: str) -> str:
        return f"{message} | {detail}" if detail else message

    if status == 404:
        message = with_detail(f"{context} not found")
        LOGGER.info(message)
        return YamapResourceNotFoundError(message)

    if status in (401, 403):
        message = with_detail(f"{context} forbidden (status {status})")
        LOGGER.warning(message)
        return YamapPermissionError(message)

    message = with_detail(f"{context} request failed (status {status})")
    LOGGER.error(message)
    return YamapAPIError(message)


def extract_error(resp: Optional[requests.Response]) -> Optional[str]:
    """Return compact string with YAMAP error info if present."""

    if resp is None:
        return None
    data = _safe_json(resp)
    if data is None:
        return _extract_error_text(resp)
    if not isinstance(data, dict):
        return None
    parts = _collect_error_parts(data)
    return " | ".join(parts) if parts else None


def _safe_json(resp: requests.Response) -> Optional[Any]:
    """Safely parse JSON; return None if parsing fails."""

    try:
        return resp.json()
    except ValueError as exc:
        LOGGER.debug(
            "Failed to decode JSON from %s: %s", getattr(resp, "url", "?"), exc
        )
        return None


def _extract_error_text(resp: requests.Response) -> Optional[str]:
    """Best-effort plain-text extraction when JSON parsing fails."""

    text = getattr(resp, "text", "")
    if not isinstance(text, str):
        return None
    trimmed = text.strip()
    if not trimmed:
        return None
    return (trimmed[:297] + "...") if len(trimmed) > 300 else trimmed


def _collect_error_parts(data: Dict[str, Any]) -> List[str]:
    """Build error snippets from a JSON error body."""

    parts: List[str] = []
    for key in ("message", "error"):
        value = data.get(key)
        if isinstance(value, str) and value:
            parts.append(value)
    errors = data.get("errors")
    if isinstance(errors, list):
        for err in errors:
            if isinstance(err, str):
                parts.append(err)
            elif isinstance(err, dict) and err.get("message"):
                parts.append(str(err["message"]))
    return parts
