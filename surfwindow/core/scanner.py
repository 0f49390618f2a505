# surfwindow/core/scanner.py
"""
Find good surf windows by walking the tide curve in fixed steps.

At every step two things must hold: the reconstructed tide height is inside
the requested band, and there is usable light. Consecutive passing steps
form a run; each run becomes one GoodTimeWindow.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from .daylight import DaylightIndex
from .dates import as_utc, clock_label, elapsed
from .goodtime import GoodTimeWindow
from .records import ResolvedThresholds, ThresholdOptions
from .spline import Spline

_LOGGER = logging.getLogger(__name__)

DEFAULT_STEP = timedelta(minutes=5)


@dataclass(slots=True)
class _Run:
    """Mutable bookkeeping for the run currently being extended."""
    start: datetime
    start_height: float
    last: datetime
    last_height: float
    low: float
    low_time: datetime

    def extend(self, t: datetime, height: float) -> None:
        self.last = t
        self.last_height = height
        if height < self.low:
            self.low = height
            self.low_time = t

    def to_window(self) -> GoodTimeWindow:
        return GoodTimeWindow(
            start=self.start,
            duration=elapsed(self.start, self.last),
            reasons=tuple(self.reasons()),
        )

    def reasons(self) -> list[str]:
        out = [f"tide bottoms out at {self.low:.2f}ft at {clock_label(self.low_time)}"]
        if as_utc(self.start) != as_utc(self.low_time):
            out.append(f"tide is {self.start_height:.2f}ft at the start ({clock_label(self.start)})")
        if as_utc(self.last) != as_utc(self.low_time):
            out.append(f"tide is {self.last_height:.2f}ft at the end ({clock_label(self.last)})")
        return out


def passes(
    spline: Spline,
    daylight: DaylightIndex,
    thresholds: ResolvedThresholds,
    t: datetime,
) -> bool:
    """Both the tide band and the daylight test hold at `t`."""
    return _check(spline, daylight, thresholds, t)[1]


def _check(
    spline: Spline,
    daylight: DaylightIndex,
    thresholds: ResolvedThresholds,
    t: datetime,
) -> tuple[float, bool]:
    height = spline.height_at(t)
    return height, thresholds.admits(height) and daylight.daylight(t)


def scan(
    spline: Spline,
    daylight: DaylightIndex,
    options: ThresholdOptions | None = None,
    *,
    step: timedelta = DEFAULT_STEP,
) -> list[GoodTimeWindow]:
    """
    Walk [spline.start, spline.end) in `step` increments and return good windows.

    Windows come out sorted by start and never overlap. Inverted thresholds
    (low above high) are legal and simply produce no windows.
    """
    if step <= timedelta(0):
        raise ValueError("scan step must be a positive timedelta")

    thresholds = (options if options is not None else ThresholdOptions()).resolve()
    if not spline:
        return []
    if thresholds.inverted:
        _LOGGER.debug(
            "scan: inverted thresholds low=%.2f high=%.2f, no windows possible",
            thresholds.low_tide, thresholds.high_tide,
        )
        return []

    windows: list[GoodTimeWindow] = []
    run: _Run | None = None

    # Step in UTC so samples stay evenly spaced in real time across DST changes.
    zone = spline.start.tzinfo
    cursor, stop = as_utc(spline.start), as_utc(spline.end)
    while cursor < stop:
        t = cursor if zone is None else cursor.astimezone(zone)
        height, ok = _check(spline, daylight, thresholds, t)

        if ok:
            if run is None:
                run = _Run(start=t, start_height=height, last=t, last_height=height, low=height, low_time=t)
            else:
                run.extend(t, height)
        elif run is not None:
            windows.append(_emit(run))
            run = None

        cursor += step

    if run is not None:
        windows.append(_emit(run))

    _LOGGER.debug(
        "scan: %d window(s) between %s and %s (low=%.2f high=%.2f step=%s)",
        len(windows), spline.start, spline.end, thresholds.low_tide, thresholds.high_tide, step,
    )
    return windows


def _emit(run: _Run) -> GoodTimeWindow:
    window = run.to_window()
    _LOGGER.debug("scan: window at %s for %s, low %.2fft", window.start, window.duration, run.low)
    return window
