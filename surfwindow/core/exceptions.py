# surfwindow/core/exceptions.py
from __future__ import annotations


class CoreError(Exception):
    """Base error for all surfwindow exceptions."""


# ---- Validation / construction errors ----
class InvalidAnchor(CoreError):
    """Raised when a TideAnchor is constructed with invalid inputs."""


class DegenerateSegment(CoreError):
    """Raised when two consecutive anchors do not have increasing timestamps."""


class InvalidSunEvents(CoreError):
    """Raised when a sun event series is unordered or does not alternate."""


class InvalidThresholds(CoreError):
    """Raised when ThresholdOptions holds non-numeric or non-finite bounds."""


class InvalidWindow(CoreError):
    """Raised when a GoodTimeWindow is constructed with invalid inputs."""


class InvalidConfig(CoreError):
    """Raised when a configuration mapping or file cannot be used."""


# ---- Boundary errors (raw data sources) ----
class InvalidPrediction(CoreError, ValueError):
    """Raised when a raw tide prediction entry cannot be parsed."""


class PredictionSourceError(CoreError):
    """Raised when the tide prediction source reports an error."""


class NoSunEvent(CoreError):
    """Raised when the sun does not rise or set on a given day (polar day/night)."""
