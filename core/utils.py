from __future__ import annotations

import math
from datetime import date
from typing import Optional

MONTH_ABBREVIATIONS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def safe_div(n: float, d: float) -> float:
    return float(n) / float(d) if d else 0.0


def round_half_up(v: float) -> int:
    # Halves round towards +inf, e.g. 2.5 -> 3, -2.5 -> -2.
    return int(math.floor(float(v) + 0.5))


def parse_number(raw) -> Optional[float]:
    """Parse user text into a finite float, or None."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        v = float(str(raw).strip())
    except ValueError:
        return None
    return v if math.isfinite(v) else None


def parse_integer(raw) -> Optional[int]:
    """Parse user text into an int. Decimal text is truncated ("21.7" -> 21)."""
    v = parse_number(raw)
    return None if v is None else int(v)


def _is_ascii_digits(s: str) -> bool:
    # str.isdigit also accepts superscripts like "²", which int() rejects.
    return s.isascii() and s.isdigit()


def format_uk_date(d: date) -> str:
    # No zero padding: 7 March 2025 -> "7/3/2025"
    return f"{d.day}/{d.month}/{d.year}"


def parse_uk_date(text) -> Optional[date]:
    """
    Parse day/month/year text. Returns None for anything that is not a
    real calendar date (wrong shape, non-numeric parts, 31/2/2025, ...).
    """
    if text is None:
        return None
    parts = [p.strip() for p in str(text).strip().split("/")]
    if len(parts) != 3 or not all(_is_ascii_digits(p) for p in parts):
        return None
    try:
        day, month, year = (int(p) for p in parts)
        return date(year, month, day)
    except (ValueError, OverflowError):
        return None


def month_label(month: int, year: int) -> str:
    return f"{MONTH_ABBREVIATIONS[month - 1]} {year}"


def resolve_month_key(label) -> tuple[int, int]:
    """
    "Mar 2025" -> (3, 2025). Unknown abbreviations or a bad year
    resolve to month 0, which matches no row.
    """
    parts = str(label or "").split()
    if len(parts) != 2:
        return 0, 0
    abbrev, year_text = parts
    if abbrev not in MONTH_ABBREVIATIONS or not _is_ascii_digits(year_text):
        return 0, 0
    try:
        return MONTH_ABBREVIATIONS.index(abbrev) + 1, int(year_text)
    except ValueError:
        return 0, 0
