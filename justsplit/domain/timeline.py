"""Pure functions for placing expenses on an event timeline.

This module contains the functional core for the timeline view:
- No I/O operations (no ledger, no console, no network)
- No side effects
- Pure data transformations
- Easy to test

Positions are percentages of the event window. 0 and 100 are reserved for
the start and end markers, -20..0 holds pre-event expenses and 100..120
holds post-event expenses.
"""

import math
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone

from justsplit.dates import parse_timestamp, utc_now
from justsplit.domain.models import Event, Expense, Position, PositionedGroup

Clock = Callable[[], datetime]

# Positions closer than this are drawn as one marker
PROXIMITY_THRESHOLD = 5.0

BOUNDARY_TOLERANCE = timedelta(hours=1)

# Overflow zones span 20% of the axis and cover up to 30 days
OVERFLOW_SPAN = 20.0
OVERFLOW_DAYS = 30

START_MARKER_POSITION = Position(1.0)
END_MARKER_POSITION = Position(99.0)
MIDPOINT_POSITION = Position(50.0)


def round_half_up(value: float) -> float:
    """Round to the nearest integer, with halves rounded up."""
    return float(math.floor(value + 0.5))


def freeze_clock(now: Clock | None = None) -> Clock:
    """Read the clock once and return a clock that always reports that instant.

    Args:
        now: Clock to read. If None, uses the real UTC clock.

    Returns:
        Zero-argument callable returning an aware UTC datetime.
    """
    current = (now or utc_now)()
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return lambda: current


def resolve_window(
    start_date: str,
    end_date: str | None = None,
    now: Clock | None = None,
) -> tuple[datetime, datetime]:
    """Resolve an event's start and end instants.

    An ongoing event (no end date) ends now. If it has not started yet the
    window collapses onto the start instant.

    Args:
        start_date: ISO-8601 event start.
        end_date: ISO-8601 event end, or None if ongoing.
        now: Clock used for ongoing events.

    Returns:
        Tuple of (start, end) as aware UTC datetimes.

    Raises:
        ValueError: If a date is invalid or the event ends before it starts.
    """
    start = parse_timestamp(start_date)

    if end_date is not None:
        end = parse_timestamp(end_date)
        if end < start:
            raise ValueError(f"Event ends before it starts: {end_date} < {start_date}")
        return start, end

    current = freeze_clock(now)()
    return start, max(current, start)


def overflow_offset(distance: timedelta) -> float:
    """Calculate how far into an overflow zone a date falls.

    Args:
        distance: Time between the date and the nearest event boundary.

    Returns:
        Offset in percentage points (0 to 20).
    """
    days = distance / timedelta(days=1)
    return min(OVERFLOW_SPAN, OVERFLOW_SPAN * min(days, OVERFLOW_DAYS) / OVERFLOW_DAYS)


def calculate_position_percentage(
    date: str,
    start_date: str,
    end_date: str | None = None,
    now: Clock | None = None,
) -> Position:
    """Calculate where a date sits on an event's timeline.

    Args:
        date: ISO-8601 date of the expense.
        start_date: ISO-8601 event start.
        end_date: ISO-8601 event end, or None if ongoing.
        now: Clock used for ongoing events. Defaults to the real UTC clock.

    Returns:
        Position in the range -20 to 120.

    Raises:
        ValueError: If a date is invalid or the event ends before it starts.
    """
    target = parse_timestamp(date)
    start, end = resolve_window(start_date, end_date, now)

    if target < start:
        return Position(-overflow_offset(start - target))

    if target > end:
        return Position(100 + overflow_offset(target - end))

    if start == end:
        return MIDPOINT_POSITION

    # Keep markers off the start and end dots at 0% and 100%
    if target - start < BOUNDARY_TOLERANCE:
        return START_MARKER_POSITION

    if end_date is not None and end - target < BOUNDARY_TOLERANCE:
        return END_MARKER_POSITION

    percentage = round_half_up((target - start) / (end - start) * 100)
    return Position(max(START_MARKER_POSITION, min(END_MARKER_POSITION, percentage)))


def group_nearby_expenses(
    expenses: Sequence[Expense],
    event: Event,
    now: Clock | None = None,
) -> list[PositionedGroup]:
    """Group expenses whose timeline positions are close together.

    Expenses are taken in input order. Each joins the first group whose
    centroid is less than PROXIMITY_THRESHOLD away from its position,
    otherwise it opens a new group. A group's centroid is the mean of its
    members' positions, recomputed whenever a member is added. Input order
    therefore decides which expenses anchor groups.

    Args:
        expenses: Expenses to place.
        event: Event whose window defines the axis.
        now: Clock used when the event is ongoing.

    Returns:
        Groups in creation order. Every expense appears in exactly one group.

    Raises:
        ValueError: If any expense or event date is invalid.
    """
    clock = freeze_clock(now)
    positioned = [
        (expense, calculate_position_percentage(expense.date, event.start_date, event.end_date, clock))
        for expense in expenses
    ]

    centroids: list[float] = []
    members: list[list[Expense]] = []
    member_positions: list[list[float]] = []

    for expense, position in positioned:
        for index, centroid in enumerate(centroids):
            if abs(centroid - position) < PROXIMITY_THRESHOLD:
                members[index].append(expense)
                member_positions[index].append(position)
                centroids[index] = sum(member_positions[index]) / len(member_positions[index])
                break
        else:
            centroids.append(position)
            members.append([expense])
            member_positions.append([position])

    return [
        PositionedGroup(position=Position(centroid), expenses=tuple(group))
        for centroid, group in zip(centroids, members)
    ]


def calculate_timeline_progress(
    start_date: str,
    end_date: str | None = None,
    now: Clock | None = None,
) -> float:
    """Calculate how much of an event has elapsed.

    Args:
        start_date: ISO-8601 event start.
        end_date: ISO-8601 event end, or None if ongoing.
        now: Clock to measure against. Defaults to the real UTC clock.

    Returns:
        Percentage elapsed (0-100): 0 before the start, 100 after the end.

    Raises:
        ValueError: If a date is invalid or the event ends before it starts.
    """
    clock = freeze_clock(now)
    start, end = resolve_window(start_date, end_date, clock)
    current = clock()

    if current > end:
        return 100.0
    if current < start:
        return 0.0
    if end == start:
        return 100.0

    return min(100.0, round_half_up((current - start) / (end - start) * 100))
