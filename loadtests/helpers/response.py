"""Response error extraction for load test observability.

Parses storefront API error responses into human-readable messages.
Error bodies look like:

    {"success": false, "message": "...", "errors": [{"field": "...", "message": "..."}]}

`errors` is present for validation failures (400) only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    Gracefully handles unparseable bodies and missing fields.
    """
    try:
        body = response.json()
    except Exception:
        # Not JSON: return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict):
        return str(body)[:300]

    errors = body.get("errors")
    if isinstance(errors, list) and len(errors) > 1:
        parts = []
        for err in errors:
            field = err.get("field")
            message = err.get("message", str(err))
            parts.append(f"{field}: {message}" if field else message)
        return " | ".join(parts)

    if "message" in body:
        detail = str(body["message"])
        # Non-production servers include the exception text on 500s
        if body.get("error"):
            detail = f"{detail} ({body['error']})"
        return detail

    # Unknown shape: stringify and truncate
    return str(body)[:300]
