"""Display formatting helpers.

Dates are shown the way the Turkish UI shows them ("14 Kasım 2024"),
independent of the process locale.
"""

from __future__ import annotations

from datetime import date, datetime

from yks_tracker.core.exam_repository import parse_exam_date

TR_MONTHS = (
    "Ocak",
    "Şubat",
    "Mart",
    "Nisan",
    "Mayıs",
    "Haziran",
    "Temmuz",
    "Ağustos",
    "Eylül",
    "Ekim",
    "Kasım",
    "Aralık",
)


def format_date(value: str | date | datetime) -> str:
    """Format a date as "<day> <month name> <year>" in local time.

    Unparseable strings are returned unchanged.
    """
    if isinstance(value, str):
        parsed = parse_exam_date(value)
        if parsed is None:
            return value
        try:
            value = parsed.astimezone()
        except (OverflowError, ValueError, OSError):
            return value
    return f"{value.day} {TR_MONTHS[value.month - 1]} {value.year}"


def format_net(value: float) -> str:
    """Net with at most two decimals ("12.5", "-1", "9.75")."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def truncate(text: str, max_len: int = 120) -> str:
    """Truncate text with ellipsis if too long."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
