"""Normalization helpers.

Centralizes permissive parsing of MQTT text payloads.  Every parser
returns ``None`` for values it cannot interpret so the caller keeps the
previous value.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        result = float(text)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    """Parse a base-10 integer.

    Decimal text such as ``"7.5"`` is rejected rather than truncated.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text, 10)
    except (TypeError, ValueError):
        return None


def safe_bool(value: Any) -> bool | None:
    """TeslaMate publishes booleans as ``"true"``/``"false"``.

    Anything other than ``"true"`` reads as ``False``.
    """
    if value is None:
        return None
    return str(value) == "true"


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)
