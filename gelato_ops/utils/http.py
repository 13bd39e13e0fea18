from __future__ import annotations

from typing import Any, Optional

from flask import Request, has_request_context, request

__all__ = ["json_body", "client_ip"]


def json_body(req: Optional[Request] = None) -> dict[str, Any]:
    """Return the JSON object body, or an empty dict for missing/non-object payloads."""
    req = req or request
    payload = req.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def client_ip(req: Optional[Request] = None) -> str | None:
    req = req or (request if has_request_context() else None)
    if req is None:
        return None
    forwarded = req.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return req.remote_addr
