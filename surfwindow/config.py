# surfwindow/config.py
"""
Runtime configuration.

A TOML file may override any of the defaults below:

    [scan]
    step_minutes = 5
    twilight_minutes = 30

    [thresholds]
    low_tide = -1000.0
    high_tide = 1.0

    [cache]
    ttl_hours = 12
    sweep_interval_minutes = 60

    [noaa]
    station = 9413745

    [place]
    latitude = 36.9741
    longitude = -122.0308
    timezone = "America/Los_Angeles"

    [sun]
    data_dir = "~/.cache/surfwindow"
"""
from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Mapping
from zoneinfo import ZoneInfoNotFoundError

from surfwindow.core import InvalidConfig, InvalidThresholds, ThresholdOptions
from surfwindow.core.daylight import DEFAULT_TWILIGHT
from surfwindow.core.scanner import DEFAULT_STEP
from surfwindow.io.sun import DEFAULT_DATA_DIR, SANTA_CRUZ, Place


DEFAULTS: dict[str, Any] = {
    "scan": {"step_minutes": 5, "twilight_minutes": 30},
    "thresholds": {},
    "cache": {"ttl_hours": 12, "sweep_interval_minutes": 60},
    "noaa": {"station": 9413745},
    "place": {
        "latitude": SANTA_CRUZ.latitude,
        "longitude": SANTA_CRUZ.longitude,
        "timezone": SANTA_CRUZ.timezone,
    },
    "sun": {"data_dir": DEFAULT_DATA_DIR},
}


@dataclass(frozen=True, slots=True)
class SurfConfig:
    step: timedelta = DEFAULT_STEP
    twilight: timedelta = DEFAULT_TWILIGHT
    thresholds: ThresholdOptions = field(default_factory=ThresholdOptions)
    cache_ttl: timedelta = timedelta(hours=12)
    sweep_interval: timedelta = timedelta(hours=1)
    station: int = 9413745
    place: Place = SANTA_CRUZ
    sun_data_dir: str = DEFAULT_DATA_DIR

    def __post_init__(self) -> None:
        if self.step <= timedelta(0):
            raise InvalidConfig("scan step must be positive.")
        if self.twilight < timedelta(0):
            raise InvalidConfig("twilight must not be negative.")
        if self.cache_ttl <= timedelta(0) or self.sweep_interval <= timedelta(0):
            raise InvalidConfig("cache ttl and sweep interval must be positive.")
        try:
            self.place.tz
        except (ValueError, ZoneInfoNotFoundError) as e:
            raise InvalidConfig(f"Unknown time zone {self.place.timezone!r}.") from e

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SurfConfig":
        cfg = merge_dicts(DEFAULTS, dict(data))
        scan, thresholds, cache, noaa, place, sun = (
            _section(cfg, name) for name in ("scan", "thresholds", "cache", "noaa", "place", "sun")
        )
        try:
            return cls(
                step=timedelta(minutes=float(scan["step_minutes"])),
                twilight=timedelta(minutes=float(scan["twilight_minutes"])),
                thresholds=ThresholdOptions(
                    low_tide=thresholds.get("low_tide"),
                    high_tide=thresholds.get("high_tide"),
                ),
                cache_ttl=timedelta(hours=float(cache["ttl_hours"])),
                sweep_interval=timedelta(minutes=float(cache["sweep_interval_minutes"])),
                station=int(noaa["station"]),
                place=Place(
                    latitude=float(place["latitude"]),
                    longitude=float(place["longitude"]),
                    timezone=str(place["timezone"]),
                ),
                sun_data_dir=str(sun["data_dir"]),
            )
        except InvalidThresholds as e:
            raise InvalidConfig(str(e)) from e
        except (TypeError, ValueError) as e:
            raise InvalidConfig(f"Invalid configuration value: {e}") from e


def _section(cfg: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = cfg.get(name)
    if not isinstance(section, Mapping):
        raise InvalidConfig(f"[{name}] must be a table.")
    return section


def merge_dicts(a: Mapping[str, Any], b: Mapping[str, Any]) -> dict[str, Any]:
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, Mapping) and isinstance(out.get(k), Mapping):
            out[k] = merge_dicts(out[k], v)
        else:
            out[k] = v
    return out


def load_toml(path: str | Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_config(path: str | Path | None = None) -> SurfConfig:
    """Load a SurfConfig from a TOML file; defaults only when `path` is None."""
    if path is None:
        return SurfConfig.from_mapping({})
    try:
        data = load_toml(path)
    except FileNotFoundError as e:
        raise InvalidConfig(f"Config file not found: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise InvalidConfig(f"Config file {path} is not valid TOML: {e}") from e
    return SurfConfig.from_mapping(data)
