"""Request hooks: no-cache, CORS preflight, security headers and request ids."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from email.utils import format_datetime

from flask import Flask, Response, g, has_app_context, request

REQUEST_ID_HEADER = "X-Request-Id"

_REQUEST_ID_KEY = "request_id"
_PREFLIGHT_KEY = "preflight_answered"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, max-age=0, must-revalidate, value",
    "Expires": "Thu, 01 Jan 1970 00:00:00 GMT",
}

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,PUT,PATCH,DELETE,OPTIONS",
    "Access-Control-Allow-Headers": "authorization, origin, content-type, accept",
    "Allow": "HEAD,GET,POST,PUT,PATCH,DELETE,OPTIONS",
    "Content-Type": "application/json",
}

SECURE_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "X-XSS-Protection": "1; mode=block",
}

HSTS_VALUE = "max-age=31536000"


def get_request_id() -> str:
    """Return the current request's id, or an empty string outside a request."""
    if not has_app_context():
        return ""
    value = g.get(_REQUEST_ID_KEY)
    return value if isinstance(value, str) else ""


def _before_request() -> Response | None:
    if request.method == "OPTIONS":
        setattr(g, _PREFLIGHT_KEY, True)
        response = Response(status=200)
        response.headers.update(PREFLIGHT_HEADERS)
        return response

    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    setattr(g, _REQUEST_ID_KEY, request_id)
    return None


def _after_request(response: Response) -> Response:
    response.headers.update(NO_CACHE_HEADERS)
    response.headers["Last-Modified"] = format_datetime(datetime.now(timezone.utc), usegmt=True)

    if g.get(_PREFLIGHT_KEY):
        return response

    response.headers.update(SECURE_HEADERS)
    if request.is_secure:
        response.headers["Strict-Transport-Security"] = HSTS_VALUE

    request_id = get_request_id()
    if request_id:
        response.headers[REQUEST_ID_HEADER] = request_id
    return response


def register(app: Flask) -> Flask:
    """Install the request hooks on ``app`` and return it."""
    app.before_request(_before_request)
    app.after_request(_after_request)
    return app