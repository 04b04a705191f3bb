"""OpenAPI documentation for store error payloads."""

from typing import Any, Dict

_ERROR_SCHEMA = {
    "type": "object",
    "properties": {
        "success": {"type": "boolean", "const": False},
        "error": {"type": "string"},
    },
}

STORE_ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    401: {
        "description": "Token or session ID missing, or token matches neither role",
        "content": {"application/json": {"schema": _ERROR_SCHEMA}},
    },
    403: {
        "description": "Role is bound to another session",
        "content": {"application/json": {"schema": _ERROR_SCHEMA}},
    },
}
