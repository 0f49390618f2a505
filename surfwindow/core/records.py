# surfwindow/core/records.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .exceptions import InvalidAnchor, InvalidSunEvents, InvalidThresholds


DEFAULT_LOW_TIDE = -1000.0   # ft, effectively unbounded below
DEFAULT_HIGH_TIDE = 1.0      # ft


class TideKind(str, Enum):
    """Tide extremum kind, valued with the NOAA letter codes."""
    HIGH = "H"
    LOW = "L"


class SunKind(str, Enum):
    SUNRISE = "sunrise"
    SUNSET = "sunset"


@dataclass(frozen=True, slots=True)
class TideAnchor:
    """
    A predicted tide extremum (high or low water).

    - time: instant of the extremum
    - height: water height in feet (may be negative)
    - kind: TideKind (or its "H"/"L" code)
    """
    time: datetime
    height: float
    kind: TideKind

    def __post_init__(self) -> None:
        if not isinstance(self.time, datetime):
            raise InvalidAnchor("TideAnchor.time must be a datetime.")

        try:
            height = float(self.height)
        except (TypeError, ValueError) as e:
            raise InvalidAnchor(f"TideAnchor.height must be numeric, got {self.height!r}.") from e
        if not math.isfinite(height):
            raise InvalidAnchor("TideAnchor.height must be finite.")

        try:
            kind = TideKind(self.kind)
        except ValueError as e:
            raise InvalidAnchor(f"TideAnchor.kind must be 'H' or 'L', got {self.kind!r}.") from e

        object.__setattr__(self, "height", height)
        object.__setattr__(self, "kind", kind)

    def __str__(self) -> str:
        label = "High" if self.kind is TideKind.HIGH else "Low"
        return f"{self.time:%Y-%m-%d %H:%M} {label} {self.height:.2f}ft"


@dataclass(frozen=True, slots=True)
class SunEvent:
    time: datetime
    kind: SunKind

    def __post_init__(self) -> None:
        if not isinstance(self.time, datetime):
            raise InvalidSunEvents("SunEvent.time must be a datetime.")
        try:
            object.__setattr__(self, "kind", SunKind(self.kind))
        except ValueError as e:
            raise InvalidSunEvents(f"SunEvent.kind must be sunrise or sunset, got {self.kind!r}.") from e

    def __str__(self) -> str:
        return f"{self.time:%d %b %y %H:%M} {self.kind.value.capitalize()}"


@dataclass(frozen=True, slots=True)
class ResolvedThresholds:
    """Fully populated tide band, inclusive at both bounds."""
    low_tide: float
    high_tide: float

    @property
    def inverted(self) -> bool:
        return self.low_tide > self.high_tide

    def admits(self, height: float) -> bool:
        # NaN compares False on both sides, so an unknown height never passes.
        return self.low_tide <= height <= self.high_tide


@dataclass(frozen=True, slots=True)
class ThresholdOptions:
    """
    Caller-supplied tide band. Either bound may be left unset.

    Unset bounds are filled in once by `resolve()`; downstream code only ever
    sees ResolvedThresholds.
    """
    low_tide: float | None = None
    high_tide: float | None = None

    def __post_init__(self) -> None:
        for name in ("low_tide", "high_tide"):
            value = getattr(self, name)
            if value is None:
                continue
            try:
                value = float(value)
            except (TypeError, ValueError) as e:
                raise InvalidThresholds(f"ThresholdOptions.{name} must be numeric, got {value!r}.") from e
            if math.isnan(value):
                raise InvalidThresholds(f"ThresholdOptions.{name} must not be NaN.")
            object.__setattr__(self, name, value)

    def resolve(
        self,
        *,
        default_low: float = DEFAULT_LOW_TIDE,
        default_high: float = DEFAULT_HIGH_TIDE,
    ) -> ResolvedThresholds:
        return ResolvedThresholds(
            low_tide=default_low if self.low_tide is None else self.low_tide,
            high_tide=default_high if self.high_tide is None else self.high_tide,
        )

    def merged(self, overrides: "ThresholdOptions") -> "ThresholdOptions":
        """Return a copy where bounds set in `overrides` replace ours."""
        return ThresholdOptions(
            low_tide=self.low_tide if overrides.low_tide is None else overrides.low_tide,
            high_tide=self.high_tide if overrides.high_tide is None else overrides.high_tide,
        )
