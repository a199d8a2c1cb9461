"""Prefixed unique identifiers for markets, bets and outcomes."""

from __future__ import annotations

import random
import string
import uuid

_BASE36 = string.digits + string.ascii_lowercase


def _hex(length: int) -> str:
    return uuid.uuid4().hex[:length]


def generate_market_id() -> str:
    return f"mkt_{_hex(16)}"


def generate_bet_id() -> str:
    return f"bet_{_hex(16)}"


def generate_outcome_id() -> str:
    return f"out_{_hex(8)}"


def short_id(length: int = 8) -> str:
    """Short random base-36 id for display only (not collision safe)."""
    return "".join(random.choices(_BASE36, k=length))


def is_valid_id(value: object, prefix: str | None = None) -> bool:
    """Non-empty string, optionally starting with '<prefix>_'."""
    if not isinstance(value, str) or not value:
        return False
    if prefix and not value.startswith(f"{prefix}_"):
        return False
    return True
