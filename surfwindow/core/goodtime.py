# surfwindow/core/goodtime.py
from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Iterable

from .dates import clock_label, day_key, is_today, is_tomorrow, shift, within_week
from .exceptions import InvalidWindow


@dataclass(frozen=True, slots=True)
class GoodTimeWindow:
    """
    A stretch of time worth paddling out for.

    - start: first qualifying instant
    - duration: time from the first to the last qualifying sample (0 for one sample)
    - reasons: human-readable justifications, in display order

    The `pretty_time` label depends on the current date, so it is computed on
    first access and then kept.
    """
    start: datetime
    duration: timedelta
    reasons: tuple[str, ...] = ()

    _pretty: str | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.start, datetime):
            raise InvalidWindow("GoodTimeWindow.start must be a datetime.")
        if not isinstance(self.duration, timedelta) or self.duration < timedelta(0):
            raise InvalidWindow("GoodTimeWindow.duration must be a non-negative timedelta.")
        if isinstance(self.reasons, str):
            raise InvalidWindow("GoodTimeWindow.reasons must be a sequence of strings, not a string.")

        reasons = tuple(self.reasons)
        if not all(isinstance(r, str) for r in reasons):
            raise InvalidWindow("GoodTimeWindow.reasons must contain only strings.")
        object.__setattr__(self, "reasons", reasons)

    @property
    def end(self) -> datetime:
        return shift(self.start, self.duration)

    @property
    def pretty_time(self) -> str:
        if self._pretty is None:
            object.__setattr__(self, "_pretty", self.label())
        return self._pretty  # type: ignore[return-value]

    def label(self, *, now: datetime | None = None) -> str:
        """'Today at 4:27 PM', 'Tomorrow at ...', a weekday within the week, else 'MM/DD at ...'."""
        t = self.start
        if is_today(t, now=now):
            day = "Today"
        elif is_tomorrow(t, now=now):
            day = "Tomorrow"
        elif within_week(t, now=now):
            day = t.strftime("%A")
        else:
            day = t.strftime("%m/%d")
        return f"{day} at {clock_label(t)}"

    def __str__(self) -> str:
        return f"{self.pretty_time}, {' and '.join(self.reasons)}"

    def to_dict(self, *, pretty: bool = True) -> dict[str, Any]:
        out: dict[str, Any] = {
            "unix_time": int(self.start.timestamp()),
            "duration": int(self.duration.total_seconds()),
            "reasons": list(self.reasons),
        }
        if pretty:
            out["pretty_time"] = self.pretty_time
        return out

    def to_json(self, *, pretty: bool = True) -> str:
        return json.dumps(self.to_dict(pretty=pretty))


def group_by_day(windows: Iterable[GoodTimeWindow]) -> list[list[GoodTimeWindow]]:
    """
    Group consecutive windows that start on the same calendar day.

    Input order is preserved; windows are expected sorted by start time.
    """
    groups: list[list[GoodTimeWindow]] = []
    current_key: str | None = None
    for w in windows:
        key = day_key(w.start)
        if key != current_key:
            groups.append([])
            current_key = key
        groups[-1].append(w)
    return groups
