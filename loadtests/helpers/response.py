"""Response error extraction for load test observability.

Parses storefront API error responses into human-readable messages.
Handles three response shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Route errors (401/403/404/503): {"detail": "msg"}
- Domain errors (400/404): {"error": "msg"} or {"error": {"field": ["msg"]}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    """
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if "detail" in body:
        detail = body["detail"]
        if isinstance(detail, list):
            parts = []
            for err in detail:
                loc = ".".join(str(p) for p in err.get("loc", []))
                msg = err.get("msg", str(err))
                parts.append(f"{loc}: {msg}" if loc else msg)
            return " | ".join(parts)
        return str(detail)

    if "error" in body:
        error = body["error"]
        if isinstance(error, dict):
            return " | ".join(f"{k}: {', '.join(v) if isinstance(v, list) else v}" for k, v in error.items())
        return str(error)

    return str(body)[:300]
