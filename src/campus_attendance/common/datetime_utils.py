from __future__ import annotations

from datetime import date, datetime, time, timezone


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current UTC time as a naive datetime (DATETIME columns store UTC).

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_hhmm(value: time | str | None) -> str:
    if value is None:
        return "-"
    if isinstance(value, str):
        return value[:5]
    return value.strftime("%H:%M")


def format_time_range(start: time | str | None, end: time | str | None) -> str:
    return f"{format_hhmm(start)} - {format_hhmm(end)}"


def as_naive_utc(value: datetime) -> datetime:
    """Drop tzinfo after converting to UTC; naive values are assumed to be UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
