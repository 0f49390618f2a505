# surfwindow/core/daylight.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterator

from .dates import as_utc, shift
from .exceptions import InvalidSunEvents
from .ordered import bracket_index, is_strictly_increasing
from .records import SunEvent, SunKind


DEFAULT_TWILIGHT = timedelta(minutes=30)


@dataclass(frozen=True, slots=True)
class DaylightIndex:
    """
    Point queries over an ordered sunrise/sunset series.

    The series must be time ordered, start with a sunrise and alternate.
    Instants that are not bracketed by two events are treated as dark.
    """
    events: tuple[SunEvent, ...] = field(default=(), repr=False)
    twilight: timedelta = DEFAULT_TWILIGHT

    def __post_init__(self) -> None:
        events = tuple(self.events)
        for ev in events:
            if not isinstance(ev, SunEvent):
                raise InvalidSunEvents("DaylightIndex.events must contain SunEvent instances.")
        if events and events[0].kind is not SunKind.SUNRISE:
            raise InvalidSunEvents("Sun events must start with a sunrise.")
        if not is_strictly_increasing(events, key=lambda ev: as_utc(ev.time)):
            raise InvalidSunEvents("Sun events must be strictly increasing in time.")
        for left, right in zip(events, events[1:]):
            if left.kind is right.kind:
                raise InvalidSunEvents(
                    f"Sun events must alternate, got two {left.kind.value} events at {left.time} and {right.time}."
                )

        if not isinstance(self.twilight, timedelta) or self.twilight < timedelta(0):
            raise InvalidSunEvents("DaylightIndex.twilight must be a non-negative timedelta.")

        object.__setattr__(self, "events", events)

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[SunEvent]:
        return iter(self.events)

    def last_event_before(self, t: datetime) -> SunEvent | None:
        i = bracket_index(self.events, as_utc(t), key=lambda ev: as_utc(ev.time), inclusive=False)
        return self.events[i] if i >= 0 else None

    def sun_up(self, t: datetime) -> bool:
        i = bracket_index(self.events, as_utc(t), key=lambda ev: as_utc(ev.time), inclusive=False)
        if i < 0 or i + 1 >= len(self.events):
            return False
        rise, fall = self.events[i], self.events[i + 1]
        return rise.kind is SunKind.SUNRISE and as_utc(rise.time) < as_utc(t) < as_utc(fall.time)

    def dawn(self, t: datetime) -> bool:
        return self.sun_up(shift(t, self.twilight))

    def dusk(self, t: datetime) -> bool:
        return self.sun_up(shift(t, -self.twilight))

    def daylight(self, t: datetime) -> bool:
        """Sun is up, or it will rise or has set within the twilight margin."""
        return self.sun_up(t) or self.dawn(t) or self.dusk(t)
