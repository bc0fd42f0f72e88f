from __future__ import annotations

from typing import Any

from flask import jsonify, request

from ..core.exceptions import ValidationError
from .serialization import to_primitive


def json_body() -> dict[str, Any]:
    """Request JSON object; an empty body is treated as ``{}``."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def ok(payload=None, status: int = 200):
    return jsonify(to_primitive(payload)), status


def arg_int(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")
