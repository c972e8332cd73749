"""Formatting and parsing of the cut-point text fields."""

from __future__ import annotations

import math
from typing import Optional


def format_time(seconds: Optional[float], include_milliseconds: bool = False) -> str:
    """Format as ``M:SS`` or ``M:SS.mmm`` (minutes are not wrapped into hours)."""

    if seconds is None or not math.isfinite(seconds):
        return "0:00"
    value = max(0.0, float(seconds))
    if include_milliseconds:
        minutes, rest = divmod(int(round(value * 1000)), 60_000)
        whole, millis = divmod(rest, 1000)
        return f"{minutes}:{whole:02d}.{millis:03d}"
    minutes, whole = divmod(int(value), 60)
    return f"{minutes}:{whole:02d}"


def parse_seconds(text: object) -> Optional[float]:
    """Parse a plain number of seconds; ``None`` when the text is not one."""

    if text is None:
        return None
    cleaned = str(text).strip().replace(",", ".")
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_time(text: object) -> Optional[float]:
    """Parse ``M:SS[.mmm]``, ``H:MM:SS[.mmm]`` or plain seconds."""

    if text is None:
        return None
    cleaned = str(text).strip()
    if not cleaned:
        return None
    if ":" not in cleaned:
        return parse_seconds(cleaned)

    parts = cleaned.split(":")
    if len(parts) not in (2, 3) or any(not part.strip() for part in parts):
        return None
    try:
        whole_units = [int(part) for part in parts[:-1]]
        last = float(parts[-1].replace(",", "."))
    except ValueError:
        return None
    if any(unit < 0 for unit in whole_units) or last < 0 or not math.isfinite(last):
        return None
    total = 0.0
    for unit in whole_units:
        total = total * 60 + unit
    return total * 60 + last
