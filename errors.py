# app/errors.py
"""
Failure taxonomy for the election gateway and the JSON envelope every
failure is rendered into.

    ValidationError        -> 400
    InitializationError    -> 500
    NoAccountsError        -> 500
    UpstreamReadError      -> 500
    UpstreamWriteError     -> 500
"""
from __future__ import annotations

from typing import Any, Dict, Optional

MAX_DETAILS = 200


def _short(text: Any) -> str:
    text = str(text)
    if len(text) > MAX_DETAILS:
        return text[: MAX_DETAILS - 1] + "…"
    return text


class GatewayError(Exception):
    status_code = 500
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = _short(details) if details is not None else None
        super().__init__(self.message)


class ValidationError(GatewayError):
    status_code = 400
    default_message = "Invalid request"

    @classmethod
    def for_fields(cls, fields):
        fields = list(fields)
        if len(fields) == 1:
            return cls(f"{fields[0]} is required.")
        return cls(f"Missing required fields: {', '.join(fields)}")


class InitializationError(GatewayError):
    default_message = "Failed to initialize contract"


class NoAccountsError(GatewayError):
    default_message = "No accounts available in Web3."


class UpstreamReadError(GatewayError):
    default_message = "Failed to read from contract"

    def __init__(self, message=None, details=None, index: Optional[int] = None):
        super().__init__(message, details)
        self.index = index


class UpstreamWriteError(GatewayError):
    default_message = "Transaction failed"


def envelope(error: GatewayError) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": error.message}
    if error.details:
        body["details"] = error.details
    return body


def success(**payload) -> Dict[str, Any]:
    return {"success": True, **payload}
