"""Response error extraction for load test observability.

Parses Ordering API error responses into human-readable messages.
Every error the API returns has the shape
``{"error": {"code": "...", "message": "...", "details": {...}}}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a compact error message suitable for Locust failure messages and log lines."""
    try:
        body = response.json()
    except Exception:
        # Not JSON — return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        summary = f"{error.get('code', 'UNKNOWN')}: {error.get('message', '')}"
        details = error.get("details") or {}
        if details:
            summary += " (" + ", ".join(f"{k}={v}" for k, v in details.items()) + ")"
        return summary

    # Unknown shape — stringify and truncate
    return str(body)[:300]


def error_code(response: Response) -> str | None:
    """Return the error code of an API error response, or None."""
    try:
        error = response.json().get("error")
    except Exception:
        return None
    return error.get("code") if isinstance(error, dict) else None
