"""Shared utility functions used across multiple modules."""

from __future__ import annotations

import json
import math
import re
from typing import Any, Optional

_FENCE_RE = re.compile(r"```[A-Za-z0-9_+-]*")
_NON_NUMERIC_RE = re.compile(r"[^\d.\-]")
_CLOSERS = {"{": "}", "[": "]"}


def strip_code_fences(content: str) -> str:
    return _FENCE_RE.sub("", content or "").strip()


def extract_json(content: Optional[str]) -> Optional[Any]:
    """Parse a JSON value out of a model reply, recovering from wrapping.

    Markdown fences are dropped first and the remainder is parsed directly.
    When that fails the substring between the first opening ``{``/``[`` and
    the *last* matching closer is tried.  Returns ``None`` instead of
    raising when nothing parses.
    """
    if not content:
        return None
    cleaned = strip_code_fences(content)
    if not cleaned:
        return None
    try:
        return json.loads(cleaned)
    except ValueError:
        pass

    starts = [idx for idx in (cleaned.find("{"), cleaned.find("[")) if idx >= 0]
    if not starts:
        return None
    start = min(starts)
    end = cleaned.rfind(_CLOSERS[cleaned[start]])
    if end <= start:
        return None
    try:
        return json.loads(cleaned[start : end + 1])
    except ValueError:
        return None


def clean_number(value: Any, default: float = 0.0) -> float:
    """Coerce *value* to a finite float, falling back to *default*.

    Strings are stripped of everything except digits, ``.`` and ``-`` so
    currency symbols and thousands separators do not break parsing.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else default
    if isinstance(value, str):
        stripped = _NON_NUMERIC_RE.sub("", value)
        if not stripped:
            return default
        try:
            number = float(stripped)
        except ValueError:
            return default
        return number if math.isfinite(number) else default
    return default
