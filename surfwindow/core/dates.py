# surfwindow/core/dates.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone


_WEEK_PLUS_MINUTE = timedelta(days=7, minutes=1)


def _now_like(t: datetime) -> datetime:
    # Compare in the zone of `t` so "today" means the same calendar as the label.
    return datetime.now(t.tzinfo)


def trim_clock(t: datetime) -> datetime:
    """Midnight at the start of the calendar day of `t`."""
    return t.replace(hour=0, minute=0, second=0, microsecond=0)


def set_clock(t: datetime, hour: int, minute: int) -> datetime:
    return trim_clock(t).replace(hour=hour, minute=minute)


def same_day(t: datetime, other: datetime) -> bool:
    return t.date() == other.date()


def is_today(t: datetime, *, now: datetime | None = None) -> bool:
    return same_day(t, now if now is not None else _now_like(t))


def is_tomorrow(t: datetime, *, now: datetime | None = None) -> bool:
    now = now if now is not None else _now_like(t)
    return t.date() == now.date() + timedelta(days=1)


def within_week(t: datetime, *, now: datetime | None = None) -> bool:
    """True if `t` falls between the start of today and the same time a week out."""
    today = trim_clock(now if now is not None else _now_like(t))
    return today - timedelta(minutes=1) < t < today + _WEEK_PLUS_MINUTE


def clock_label(t: datetime) -> str:
    """12-hour wall clock, e.g. '3:04 PM'."""
    return t.strftime("%I:%M %p").lstrip("0")


def day_key(t: datetime) -> str:
    """A string that is identical for all instants on the same calendar day."""
    return t.strftime("%Y%m%d")


def as_utc(t: datetime) -> datetime:
    """`t` as a UTC instant when it carries a zone; naive values pass through."""
    return t if t.tzinfo is None else t.astimezone(timezone.utc)


def elapsed(start: datetime, end: datetime) -> timedelta:
    """
    Real time from `start` to `end`.

    Aware datetimes sharing a zone subtract on the wall clock, which is an
    hour off across a DST change; going through UTC avoids that.
    """
    return as_utc(end) - as_utc(start)


def shift(t: datetime, delta: timedelta) -> datetime:
    """`t` moved by `delta` of real time, kept in the zone of `t`."""
    if t.tzinfo is None:
        return t + delta
    return (as_utc(t) + delta).astimezone(t.tzinfo)
