"""Utility helpers for the dinner picker backend."""

from __future__ import annotations

import hashlib
import re
from typing import Optional

ID_LENGTH = 20

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")


def mask_secret(value: Optional[str], visible: int = 4) -> str:
    if not value:
        return "unset"
    if len(value) <= visible * 2:
        return "*" * len(value)
    return f"{value[:visible]}...{value[-visible:]}"


def content_id(text: str, length: int = ID_LENGTH) -> str:
    """Stable short identifier for a piece of text (truncated SHA-256 hex)."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:length]


def leading_number(text: Optional[str]) -> float:
    """Parse the number a string starts with, e.g. "4.5 stars" -> 4.5.

    Anything without a leading number (including None) reads as 0.0.
    """
    if not text:
        return 0.0
    match = _LEADING_NUMBER.match(text)
    if not match:
        return 0.0
    try:
        return float(match.group(1))
    except ValueError:
        return 0.0
