"""Date utilities for justsplit.

Pure functions for timestamp parsing and formatting. Every date is handled in
UTC: naive ISO strings are read as UTC so that positions and labels do not
depend on the machine's local timezone.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as an aware UTC datetime (the default clock)."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 date or datetime string.

    Args:
        value: Date string such as "2023-06-01" or "2023-06-05T12:00:00Z".

    Returns:
        Aware datetime in UTC.

    Raises:
        ValueError: If the value is empty or not a valid ISO-8601 date.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid date: {value!r}")

    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise ValueError(f"Could not parse date '{value}': {e}") from e

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timeline_date(date_string: str) -> str:
    """Format a date for timeline labels.

    Args:
        date_string: ISO-8601 date or datetime string.

    Returns:
        Label in "MMM d, yyyy" form (e.g., "Jun 5, 2023").
    """
    dt = parse_timestamp(date_string)
    return f"{dt:%b} {dt.day}, {dt.year}"


def format_date_range(start_date: str, end_date: str | None = None) -> str:
    """Format an event's date range.

    Args:
        start_date: ISO-8601 start date.
        end_date: ISO-8601 end date, or None for an ongoing event.

    Returns:
        Range label (e.g., "Jun 1, 2023 - Jun 10, 2023").
    """
    start = format_timeline_date(start_date)
    if end_date is None:
        return f"{start} - Ongoing"
    return f"{start} - {format_timeline_date(end_date)}"
