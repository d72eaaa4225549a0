"""Countdown display helpers"""
from datetime import datetime, timezone


def format_time(seconds: int) -> str:
    """
    Format a number of seconds as a zero-padded MM:SS string.

    Minutes are not wrapped into hours, so 3600 becomes "60:00".

    Args:
        seconds: Non-negative number of seconds

    Returns:
        str: "MM:SS" formatted string (e.g. 665 -> "11:05")
    """
    if seconds < 0:
        raise ValueError(f"seconds must be non-negative, got {seconds}")

    minutes, remainder = divmod(int(seconds), 60)
    return f"{minutes:02d}:{remainder:02d}"


def parse_time(value: str) -> int:
    """
    Parse a "MM:SS" string back into seconds.

    Args:
        value: String such as "04:00" or "125:30"

    Returns:
        int: Total number of seconds
    """
    minutes_part, sep, seconds_part = value.strip().partition(":")
    if not sep or not minutes_part.isdigit() or not seconds_part.isdigit():
        raise ValueError(f"Expected MM:SS, got {value!r}")

    seconds = int(seconds_part)
    if seconds >= 60:
        raise ValueError(f"Seconds component must be below 60, got {value!r}")

    return int(minutes_part) * 60 + seconds


def ensure_aware_utc(dt: datetime) -> datetime:
    """
    Attach UTC to naive datetimes (SQLite drops tzinfo) and convert aware ones to UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
