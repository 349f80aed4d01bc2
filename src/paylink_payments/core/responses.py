"""
Interpretation of gateway HTTP responses.
"""

from __future__ import annotations

from typing import Any, NoReturn

import requests

from .errors import GatewayRequestError

__all__ = [
    "extract_error_message",
    "handle_response_error",
    "is_empty",
    "is_success_status",
    "response_json",
]

_ERROR_FIELDS = ("detail", "title", "error")


def response_json(response: requests.Response) -> Any:
    """Decode the body as JSON, or return ``None`` when it is empty or not JSON."""
    try:
        return response.json()
    except ValueError:
        return None


def is_success_status(status_code: int) -> bool:
    return 200 <= status_code < 300


def is_empty(payload: Any) -> bool:
    return payload is None or payload == {} or payload == [] or payload == ""


def extract_error_message(response: requests.Response, default_message: str) -> str:
    """
    Pick the most useful error text from a gateway reply.

    Checks ``detail``, ``title`` and ``error`` in that order, then the raw
    body, then ``default_message``.
    """
    payload = response_json(response)
    if isinstance(payload, dict):
        for key in _ERROR_FIELDS:
            value = payload.get(key)
            if value:
                return str(value)
    text = (response.text or "").strip()
    return text or default_message


def handle_response_error(response: requests.Response, default_message: str) -> NoReturn:
    message = extract_error_message(response, default_message)
    raise GatewayRequestError(
        f"{message}, Status code: {response.status_code}",
        status_code=response.status_code,
    )
