# surfwindow/io/load.py
from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Sequence

from surfwindow.config import SurfConfig
from surfwindow.core import (
    DaylightIndex,
    GoodTimeWindow,
    SunEvent,
    ThresholdOptions,
    TideAnchor,
    build_spline,
    scan,
)
from surfwindow.io.cache import TimedCache
from surfwindow.io.noaa import PredictionQuery, Transport, fetch_predictions
from surfwindow.io.sun import Place, Sky, load_sky, sun_events


def find_good_windows(
    anchors: Sequence[TideAnchor],
    events: Sequence[SunEvent],
    options: ThresholdOptions | None = None,
    *,
    config: SurfConfig | None = None,
) -> list[GoodTimeWindow]:
    config = config or SurfConfig()
    # Per-call options win over configured thresholds.
    thresholds = config.thresholds.merged(options or ThresholdOptions())

    spline = build_spline(anchors)
    daylight = DaylightIndex(events=tuple(events), twilight=config.twilight)
    return scan(spline, daylight, thresholds, step=config.step)


def query_for(config: SurfConfig | None = None, *, begin: date | None = None, days: int = 1) -> PredictionQuery:
    """A prediction query for the configured station, starting today in the configured zone by default."""
    config = config or SurfConfig()
    if begin is None:
        begin = datetime.now(config.place.tz).date()
    return PredictionQuery(station=config.station, begin=begin, days=days)


def find_good_windows_for(
    query: PredictionQuery | None = None,
    place: Place | None = None,
    *,
    transport: Transport,
    cache: TimedCache | None = None,
    config: SurfConfig | None = None,
    options: ThresholdOptions | None = None,
    sky: Sky | None = None,
) -> list[GoodTimeWindow]:
    """
    Fetch predictions and sun times, then scan them.

    `query` and `place` default to the station and place in `config`; the
    ephemeris is read from the configured data directory unless `sky` is given.
    """
    config = config or SurfConfig()
    query = query or query_for(config)
    place = place or config.place
    sky = sky or load_sky(config.sun_data_dir)

    anchors = fetch_predictions(query, transport=transport, cache=cache, tz=place.tz)

    start = datetime.combine(query.begin, time(0), tzinfo=place.tz)
    # One extra day so the last tides of the query still have a sunset after them.
    events = sun_events(start, timedelta(days=query.days + 1), place, sky=sky)
    return find_good_windows(anchors, events, options, config=config)


def cache_from_config(config: SurfConfig | None = None) -> TimedCache:
    """A TimedCache sized by `config`; the caller owns it and decides when to start its sweep."""
    config = config or SurfConfig()
    return TimedCache(
        config.cache_ttl.total_seconds(),
        sweep_interval=config.sweep_interval.total_seconds(),
    )
