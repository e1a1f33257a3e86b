from __future__ import annotations

from typing import Any, Optional

from flask import Response, jsonify, request

from ..core.constants import NO_STORE_HEADERS
from ..core.exceptions import ValidationError


def json_body() -> dict:
    """Request JSON as a dict; anything else is a bad request."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def error_response(status: int, message: str, error: Optional[str] = None, *, key: str = "message"):
    payload: dict[str, Any] = {key: message}
    if error:
        payload["error"] = error
    return jsonify(payload), status


def apply_no_store(response: Response) -> Response:
    for name, value in NO_STORE_HEADERS.items():
        response.headers[name] = value
    return response
