"""
Uniform response envelopes.

Success: {"success": true, "statusCode": 200, "message": "...", "data": ...}
Failure: {"success": false, "message": "...", "errorSources": [{"path", "message"}]}
"""

from __future__ import annotations

from typing import Any


def envelope(message: str, data: Any = None, *, status_code: int = 200) -> dict:
    return {
        "success": True,
        "statusCode": status_code,
        "message": message,
        "data": data,
    }


def error_envelope(message: str, error_sources: list[dict[str, str]] | None = None) -> dict:
    if error_sources is None:
        error_sources = [{"path": "", "message": message}] if message else []
    return {
        "success": False,
        "message": message,
        "errorSources": error_sources,
    }
