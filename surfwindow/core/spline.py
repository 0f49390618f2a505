# surfwindow/core/spline.py
"""
Continuous tide height reconstructed from discrete tide extrema.

Each pair of consecutive anchors is joined by a cubic whose slope is zero at
both ends, which is what the tide does at a high or low. Joining such pieces
end to end gives a curve that is continuous with zero slope at every anchor
without any global solve.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterator, Sequence

import numpy as np

from .dates import as_utc, elapsed, shift
from .exceptions import DegenerateSegment
from .ordered import bracket_index
from .records import TideAnchor

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CurveSegment:
    """
    Cubic p(x) = a*x^3 + b*x^2 + c*x + d linking two anchors.

    x is measured in seconds from `start`, not from the epoch, which keeps
    the cubic terms small. The segment is undefined outside [start, end].
    """
    start: datetime
    end: datetime
    a: float
    b: float
    c: float
    d: float

    @classmethod
    def between(cls, first: TideAnchor, second: TideAnchor) -> "CurveSegment":
        span = elapsed(first.time, second.time).total_seconds()
        if not span > 0:
            raise DegenerateSegment(
                f"Anchors must have strictly increasing times, got {first.time} then {second.time}."
            )

        dh = first.height - second.height
        return cls(
            start=first.time,
            end=second.time,
            a=2.0 * dh / span**3,
            b=-3.0 * dh / span**2,
            c=0.0,
            d=first.height,
        )

    def contains(self, t: datetime) -> bool:
        return as_utc(self.start) <= as_utc(t) <= as_utc(self.end)

    def height_at(self, t: datetime) -> float:
        if not self.contains(t):
            return math.nan
        x = elapsed(self.start, t).total_seconds()
        return ((self.a * x + self.b) * x + self.c) * x + self.d

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_unix": int(self.start.timestamp()),
            "end_unix": int(self.end.timestamp()),
            "a": self.a,
            "b": self.b,
            "c": self.c,
            "d": self.d,
        }


@dataclass(frozen=True, slots=True)
class Spline:
    """Ordered, contiguous CurveSegments. Immutable; may be empty."""

    segments: tuple[CurveSegment, ...] = field(default=(), repr=False)

    def __post_init__(self) -> None:
        segments = tuple(self.segments)
        for left, right in zip(segments, segments[1:]):
            if left.end != right.start:
                raise DegenerateSegment(
                    f"Segments must be contiguous, got a gap between {left.end} and {right.start}."
                )
        object.__setattr__(self, "segments", segments)

    # ---- sequence API ----
    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[CurveSegment]:
        return iter(self.segments)

    def __bool__(self) -> bool:
        return bool(self.segments)

    # ---- domain ----
    @property
    def start(self) -> datetime | None:
        return self.segments[0].start if self.segments else None

    @property
    def end(self) -> datetime | None:
        return self.segments[-1].end if self.segments else None

    # ---- evaluation ----
    def segment_at(self, t: datetime) -> CurveSegment | None:
        i = bracket_index(self.segments, as_utc(t), key=lambda s: as_utc(s.start))
        if i < 0:
            return None
        seg = self.segments[i]
        return seg if seg.contains(t) else None

    def height_at(self, t: datetime) -> float:
        """Tide height at `t`, or NaN when `t` is outside the spline."""
        seg = self.segment_at(t)
        if seg is None:
            return math.nan
        return seg.height_at(t)

    # ---- export ----
    def to_records(self) -> list[dict[str, Any]]:
        return [seg.to_dict() for seg in self.segments]

    def to_numpy(self) -> tuple[np.ndarray, np.ndarray]:
        """Return (bounds, coefficients): unix [start, end] per row and [a, b, c, d] per row."""
        bounds = np.array(
            [[seg.start.timestamp(), seg.end.timestamp()] for seg in self.segments],
            dtype=float,
        ).reshape(-1, 2)
        coefs = np.array(
            [[seg.a, seg.b, seg.c, seg.d] for seg in self.segments],
            dtype=float,
        ).reshape(-1, 4)
        return bounds, coefs


def build_spline(anchors: Sequence[TideAnchor]) -> Spline:
    """
    Link consecutive tide anchors with zero-slope cubics.

    Fewer than two anchors give an empty Spline. Anchors whose times do not
    strictly increase raise DegenerateSegment.
    """
    if len(anchors) < 2:
        _LOGGER.debug("build_spline: %d anchor(s), returning empty spline", len(anchors))
        return Spline()

    segments = tuple(
        CurveSegment.between(first, second)
        for first, second in zip(anchors, anchors[1:])
    )
    _LOGGER.debug(
        "build_spline: %d segments from %s to %s",
        len(segments), segments[0].start, segments[-1].end,
    )
    return Spline(segments=segments)


def sample_times(spline: Spline, n: int) -> list[datetime]:
    """n evenly spaced instants across the spline, endpoints included."""
    if not spline or n < 1:
        return []
    start, end = spline.start, spline.end
    if n == 1:
        return [start]
    span = elapsed(start, end)
    return [shift(start, span * (i / (n - 1))) for i in range(n - 1)] + [end]


def sample(spline: Spline, n: int) -> np.ndarray:
    """n evenly spaced tide heights across the spline, endpoints included."""
    return np.array([spline.height_at(t) for t in sample_times(spline, n)], dtype=float)
