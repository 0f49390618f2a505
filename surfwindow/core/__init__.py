# surfwindow/core/__init__.py
"""
Core domain objects for surfwindow.

This module defines the pure, I/O-free computation:
- Spline: continuous tide height built from high/low tide anchors
- DaylightIndex: sunrise/sunset point queries with a twilight margin
- scan: fixed-step walk producing GoodTimeWindow values

The core layer is independent from data sources and presentation.
"""

from .records import (
    TideKind,
    TideAnchor,
    SunKind,
    SunEvent,
    ThresholdOptions,
    ResolvedThresholds,
    DEFAULT_LOW_TIDE,
    DEFAULT_HIGH_TIDE,
)
from .spline import CurveSegment, Spline, build_spline, sample, sample_times
from .daylight import DaylightIndex, DEFAULT_TWILIGHT
from .goodtime import GoodTimeWindow, group_by_day
from .scanner import scan, passes, DEFAULT_STEP
from .ordered import bracket_index
from .exceptions import (
    CoreError,
    InvalidAnchor,
    DegenerateSegment,
    InvalidSunEvents,
    InvalidThresholds,
    InvalidWindow,
    InvalidConfig,
    InvalidPrediction,
    PredictionSourceError,
    NoSunEvent,
)


__all__ = [
    # records
    "TideKind",
    "TideAnchor",
    "SunKind",
    "SunEvent",
    "ThresholdOptions",
    "ResolvedThresholds",
    "DEFAULT_LOW_TIDE",
    "DEFAULT_HIGH_TIDE",

    # tide curve
    "CurveSegment",
    "Spline",
    "build_spline",
    "sample",
    "sample_times",

    # daylight
    "DaylightIndex",
    "DEFAULT_TWILIGHT",

    # windows
    "GoodTimeWindow",
    "group_by_day",
    "scan",
    "passes",
    "DEFAULT_STEP",

    # helpers
    "bracket_index",

    # exceptions
    "CoreError",
    "InvalidAnchor",
    "DegenerateSegment",
    "InvalidSunEvents",
    "InvalidThresholds",
    "InvalidWindow",
    "InvalidConfig",
    "InvalidPrediction",
    "PredictionSourceError",
    "NoSunEvent",
]
