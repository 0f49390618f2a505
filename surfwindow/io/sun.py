# surfwindow/io/sun.py
"""
Sunrise and sunset times from skyfield's almanac.

The JPL ephemeris is downloaded once into `data_dir` on first use and then
read from disk.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from functools import lru_cache
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

import skyfield
from skyfield import almanac
from skyfield.api import Loader, wgs84

from surfwindow.core import NoSunEvent, SunEvent, SunKind

_LOGGER = logging.getLogger(__name__)

EPHEMERIS = "de421.bsp"
DEFAULT_DATA_DIR = "~/.cache/surfwindow"


@dataclass(frozen=True, slots=True)
class Place:
    """A lat/long coordinate matched with its IANA time zone."""
    latitude: float
    longitude: float
    timezone: str = "UTC"

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def topos(self) -> Any:
        return wgs84.latlon(self.latitude, self.longitude)


SANTA_CRUZ = Place(36.9741, -122.0308, "America/Los_Angeles")


@dataclass(frozen=True, slots=True)
class Sky:
    """A skyfield timescale and planetary ephemeris, loaded together."""
    timescale: Any
    ephemeris: Any


@lru_cache(maxsize=None)
def _load_sky(directory: str) -> Sky:
    loader = Loader(directory)
    sky = Sky(timescale=loader.timescale(), ephemeris=loader(EPHEMERIS))
    _LOGGER.info("Skyfield %s loaded %s from %s", skyfield.__version__, EPHEMERIS, directory)
    return sky


def load_sky(data_dir: str | Path = DEFAULT_DATA_DIR) -> Sky:
    """Load (downloading if needed) the ephemeris kept in `data_dir`; cached per directory."""
    return _load_sky(str(Path(data_dir).expanduser()))


def _find_rise_set(sky: Sky, place: Place, start: datetime, end: datetime) -> list[tuple[datetime, bool]]:
    ts = sky.timescale
    f = almanac.sunrise_sunset(sky.ephemeris, place.topos())
    times, kinds = almanac.find_discrete(ts.from_datetime(start), ts.from_datetime(end), f)
    tz = place.tz
    return [(t.utc_datetime().astimezone(tz), bool(up)) for t, up in zip(times, kinds)]


def sunrise_sunset(place: Place, day: date, *, sky: Sky | None = None) -> tuple[datetime, datetime]:
    """Sunrise and sunset on local calendar `day`, in the place's time zone."""
    sky = sky or load_sky()
    tz = place.tz
    midnight = datetime.combine(day, time(0), tzinfo=tz)
    found = _find_rise_set(sky, place, midnight, datetime.combine(day + timedelta(days=1), time(0), tzinfo=tz))

    rise = next((when for when, up in found if up), None)
    fall = next((when for when, up in found if not up and rise is not None and when > rise), None)
    if rise is None or fall is None:
        raise NoSunEvent(f"No sunrise/sunset at {place.latitude:.2f} on {day.isoformat()}.")
    return rise, fall


def sun_events(
    start: datetime,
    duration: timedelta,
    place: Place,
    *,
    sky: Sky | None = None,
) -> list[SunEvent]:
    """
    Ordered sun events covering `duration` from `start`, beginning with a sunrise.

    The series starts at the first sunrise not before `start` and holds one
    sunrise/sunset pair per started day of `duration`. Spans with no sunrise
    (polar day or night) yield no pairs.
    """
    sky = sky or load_sky()
    if start.tzinfo is None:
        start = start.replace(tzinfo=place.tz)
    n_days = math.ceil(duration / timedelta(days=1))
    if n_days <= 0:
        return []

    # One extra day so the last pair is complete even if `start` is after sunrise.
    found = _find_rise_set(sky, place, start, start + timedelta(days=n_days + 1))

    events: list[SunEvent] = []
    rise: datetime | None = None
    for when, up in found:
        if up:
            rise = when
        elif rise is not None:
            events.append(SunEvent(time=rise, kind=SunKind.SUNRISE))
            events.append(SunEvent(time=when, kind=SunKind.SUNSET))
            rise = None
            if len(events) == 2 * n_days:
                break

    if not events:
        _LOGGER.warning("sun_events: no sunrise/sunset within %s of %s at %s", duration, start, place)
    return events
