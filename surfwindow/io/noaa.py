# surfwindow/io/noaa.py
"""
NOAA CO-OPS high/low tide predictions.

The HTTP call itself is not made here: callers pass a `transport` that maps
a URL to the response body. Responses are validated at this boundary, so
only well-formed TideAnchor values ever reach the core.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Protocol
from urllib.parse import urlencode

from surfwindow.core import InvalidAnchor, InvalidPrediction, PredictionSourceError, TideAnchor, TideKind

from .cache import TimedCache

_LOGGER = logging.getLogger(__name__)

NOAA_URL = "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"
QUERY_DATE_FMT = "%Y%m%d"
PREDICTION_TIME_FMT = "%Y-%m-%d %H:%M"


class Transport(Protocol):
    """Anything that can GET a URL and return the body."""

    def __call__(self, url: str) -> bytes | str:
        ...


@dataclass(frozen=True, slots=True)
class PredictionQuery:
    """High/low predictions for `station`, from `begin` for `days` calendar days."""
    station: int
    begin: date
    days: int = 1

    def __post_init__(self) -> None:
        if isinstance(self.begin, datetime):
            object.__setattr__(self, "begin", self.begin.date())
        if self.days < 1:
            raise ValueError("PredictionQuery.days must be >= 1")

    @property
    def end(self) -> date:
        return self.begin + timedelta(days=self.days)

    def params(self) -> dict[str, str]:
        return {
            "begin_date": self.begin.strftime(QUERY_DATE_FMT),
            "end_date": self.end.strftime(QUERY_DATE_FMT),
            "station": str(self.station),
            "product": "predictions",
            "datum": "MLLW",
            "time_zone": "lst_ldt",
            "interval": "hilo",
            "units": "english",
            "format": "json",
        }

    def url(self) -> str:
        return f"{NOAA_URL}?{urlencode(self.params())}"


def parse_prediction(raw: Any, *, tz: tzinfo | None = None) -> TideAnchor:
    """
    Parse one NOAA prediction entry: {"t": "2020-10-20 02:17", "v": "4.080", "type": "H"}.

    Times are station-local; `tz` attaches a zone to them if given.
    """
    if not isinstance(raw, dict):
        raise InvalidPrediction(f"Prediction entry must be an object, got {type(raw).__name__}.")

    try:
        t = datetime.strptime(str(raw["t"]), PREDICTION_TIME_FMT)
    except KeyError as e:
        raise InvalidPrediction("Prediction entry is missing its time ('t').") from e
    except ValueError as e:
        raise InvalidPrediction(f"Unparseable prediction time {raw['t']!r}.") from e
    if tz is not None:
        t = t.replace(tzinfo=tz)

    try:
        height = float(raw["v"])
    except KeyError as e:
        raise InvalidPrediction("Prediction entry is missing its height ('v').") from e
    except (TypeError, ValueError) as e:
        raise InvalidPrediction(f"Unparseable prediction height {raw['v']!r}.") from e

    try:
        kind = TideKind(raw.get("type"))
    except ValueError as e:
        raise InvalidPrediction(f"Unknown prediction type {raw.get('type')!r}.") from e

    try:
        return TideAnchor(time=t, height=height, kind=kind)
    except InvalidAnchor as e:
        raise InvalidPrediction(str(e)) from e


def decode_predictions(body: bytes | str, *, tz: tzinfo | None = None) -> list[TideAnchor]:
    """Decode a datagetter JSON response into ordered TideAnchors."""
    try:
        payload = json.loads(body)
    except ValueError as e:
        raise PredictionSourceError(f"Response is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise PredictionSourceError("Response must be a JSON object.")
    if "error" in payload:
        err = payload["error"]
        message = err.get("message") if isinstance(err, dict) else err
        raise PredictionSourceError(f"NOAA reported an error: {message}")
    if not isinstance(payload.get("predictions"), list):
        raise PredictionSourceError("Response has no 'predictions' list.")

    anchors = [parse_prediction(raw, tz=tz) for raw in payload["predictions"]]
    _LOGGER.debug("decode_predictions: %d anchors", len(anchors))
    return anchors


def fetch_predictions(
    query: PredictionQuery,
    *,
    transport: Transport,
    cache: TimedCache[bytes | str] | None = None,
    tz: tzinfo | None = None,
) -> list[TideAnchor]:
    """
    Resolve `query` through `cache` (keyed by URL), falling back to `transport`.

    Bodies are decoded before they are cached, so a malformed response is
    never stored.
    """
    url = query.url()

    body = cache.get(url) if cache is not None else None
    if body is not None:
        _LOGGER.debug("fetch_predictions: cache hit for station %s", query.station)
        return decode_predictions(body, tz=tz)

    _LOGGER.info("fetch_predictions: requesting station %s from %s", query.station, query.begin)
    body = transport(url)
    anchors = decode_predictions(body, tz=tz)
    if cache is not None:
        cache.set(url, body)
    return anchors
