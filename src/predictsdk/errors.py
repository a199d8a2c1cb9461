"""PredictSDKError and machine-readable error codes."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes carried by PredictSDKError."""

    INVALID_INPUT = "INVALID_INPUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"
    BAD_GATEWAY = "BAD_GATEWAY"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    GATEWAY_TIMEOUT = "GATEWAY_TIMEOUT"
    MARKET_NOT_FOUND = "MARKET_NOT_FOUND"
    BET_NOT_FOUND = "BET_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    MARKET_ALREADY_CREATED = "MARKET_ALREADY_CREATED"
    BET_ALREADY_PLACED = "BET_ALREADY_PLACED"
    USER_ALREADY_CREATED = "USER_ALREADY_CREATED"
    MARKET_NOT_OPEN = "MARKET_NOT_OPEN"
    MARKET_NOT_CLOSED = "MARKET_NOT_CLOSED"
    MARKET_NOT_RESOLVED = "MARKET_NOT_RESOLVED"
    INVALID_CONFIG = "INVALID_CONFIG"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"


class PredictSDKError(Exception):
    """Single structured error: code + human-readable message (+ optional details)."""

    def __init__(self, code: ErrorCode | str, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.code = ErrorCode(code)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Consistent error shape: {code, message, details}."""
        return {"code": self.code.value, "message": self.message, "details": self.details}


def market_not_found(market_id: str) -> PredictSDKError:
    return PredictSDKError(ErrorCode.MARKET_NOT_FOUND, f"Market {market_id} not found")
