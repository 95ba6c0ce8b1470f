from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    """Current time as a naive UTC datetime, the form slot times are stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_storage(value: datetime) -> datetime:
    """
    Normalise an incoming datetime for storage.

    Aware values are converted to UTC; naive values are taken to be UTC
    already. The result is naive.
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a stored naive datetime for output."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def slot_end(start: datetime, duration_minutes: int) -> datetime:
    return start + timedelta(minutes=duration_minutes)


def intervals_overlap(
    start_a: datetime, duration_a: int, start_b: datetime, duration_b: int
) -> bool:
    """
    Half-open interval test: [a, a+da) and [b, b+db) overlap.

    Slots that only touch (one ends exactly when the next starts) do not
    overlap.
    """
    return start_a < slot_end(start_b, duration_b) and start_b < slot_end(start_a, duration_a)


def day_bounds(day: date, tz_name: str) -> Tuple[datetime, datetime]:
    """
    Return the naive UTC range covering ``day`` in the calendar timezone.

    The range is [00:00:00, 23:59:59.999999] local time.
    """
    tz = ZoneInfo(tz_name)
    start_local = datetime.combine(day, time.min, tzinfo=tz)
    end_local = datetime.combine(day, time.max, tzinfo=tz)
    return to_storage(start_local), to_storage(end_local)


def local_datetime(day: date, at: time, tz_name: str) -> datetime:
    """Combine a calendar day and wall-clock time in the calendar timezone into storage form."""
    return to_storage(datetime.combine(day, at, tzinfo=ZoneInfo(tz_name)))


def parse_clock(value: str) -> time:
    """Parse an ``HH:MM`` wall-clock string."""
    hours, minutes = value.strip().split(":")
    return time(int(hours), int(minutes))
