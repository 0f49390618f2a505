# test/test_spline.py
import math
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import numpy as np
import pytest

from surfwindow.core import (
    CurveSegment,
    Spline,
    TideAnchor,
    TideKind,
    build_spline,
    sample,
    sample_times,
)
from surfwindow.core import DegenerateSegment


T0 = datetime(2021, 4, 3, 10, 30)
EPS = timedelta(seconds=1)


def _anchor(t, h, kind=TideKind.LOW):
    return TideAnchor(time=t, height=h, kind=kind)


def _tides():
    # Irregular spacing, alternating high/low, including a negative low.
    return [
        _anchor(T0, 5.2, TideKind.HIGH),
        _anchor(T0 + timedelta(hours=6, minutes=13), -0.4, TideKind.LOW),
        _anchor(T0 + timedelta(hours=12, minutes=41), 4.1, TideKind.HIGH),
        _anchor(T0 + timedelta(hours=18, minutes=2), 1.7, TideKind.LOW),
    ]


def test_segment_coefficients_small_example():
    seg = CurveSegment.between(_anchor(T0, 0.0), _anchor(T0 + timedelta(seconds=10), 10.0))
    assert np.isclose(seg.a, -0.02)
    assert np.isclose(seg.b, 0.30)
    assert np.isclose(seg.c, 0.0)
    assert np.isclose(seg.d, 0.0)


def test_segments_hit_anchor_heights_with_zero_slope():
    anchors = _tides()
    spline = build_spline(anchors)
    assert len(spline) == len(anchors) - 1

    for seg, first, second in zip(spline, anchors, anchors[1:]):
        assert seg.start == first.time and seg.end == second.time
        assert math.isclose(seg.height_at(first.time), first.height, abs_tol=1e-9)
        assert math.isclose(seg.height_at(second.time), second.height, abs_tol=1e-9)

        slope_start = (seg.height_at(first.time + EPS) - seg.height_at(first.time)) / EPS.total_seconds()
        slope_end = (seg.height_at(second.time) - seg.height_at(second.time - EPS)) / EPS.total_seconds()
        assert abs(slope_start) < 1e-5
        assert abs(slope_end) < 1e-5


def test_spline_is_continuous_at_shared_anchors():
    anchors = _tides()
    spline = build_spline(anchors)
    for a in anchors[1:-1]:
        before = spline.height_at(a.time - EPS)
        at = spline.height_at(a.time)
        after = spline.height_at(a.time + EPS)
        assert math.isclose(at, a.height, abs_tol=1e-9)
        assert math.isclose(before, at, abs_tol=1e-5)
        assert math.isclose(after, at, abs_tol=1e-5)


def test_spline_is_undefined_outside_its_domain():
    spline = build_spline(_tides())
    assert math.isnan(spline.height_at(spline.start - EPS))
    assert math.isnan(spline.height_at(spline.end + EPS))
    assert math.isnan(spline.height_at(spline.start - timedelta(days=365)))
    assert not math.isnan(spline.height_at(spline.start))
    assert not math.isnan(spline.height_at(spline.end))


def test_segment_is_undefined_outside_its_bounds():
    seg = CurveSegment.between(_anchor(T0, 1.0), _anchor(T0 + timedelta(hours=6), 3.0))
    assert math.isnan(seg.height_at(T0 - EPS))
    assert math.isnan(seg.height_at(T0 + timedelta(hours=6) + EPS))


def test_sample_long_falling_tide():
    spline = build_spline([_anchor(T0, 10.0), _anchor(T0 + timedelta(hours=1000), 1.0)])
    out = sample(spline, 10)
    assert isinstance(out, np.ndarray)
    assert np.round(out).tolist() == [10, 10, 9, 8, 6, 5, 3, 2, 1, 1]


def test_sample_includes_both_endpoints():
    anchors = _tides()
    spline = build_spline(anchors)
    times = sample_times(spline, 5)
    assert times[0] == spline.start
    assert times[-1] == spline.end

    out = sample(spline, 2)
    assert np.allclose(out, [anchors[0].height, anchors[-1].height])


def test_fewer_than_two_anchors_gives_empty_spline():
    for anchors in ([], [_anchor(T0, 1.0)]):
        spline = build_spline(anchors)
        assert len(spline) == 0
        assert not spline
        assert spline.start is None and spline.end is None
        assert math.isnan(spline.height_at(T0))
        assert sample(spline, 10).size == 0


def test_duplicate_timestamps_are_degenerate():
    with pytest.raises(DegenerateSegment):
        build_spline([_anchor(T0, 1.0), _anchor(T0, 2.0)])


def test_decreasing_timestamps_are_degenerate():
    with pytest.raises(DegenerateSegment):
        build_spline([
            _anchor(T0, 1.0),
            _anchor(T0 + timedelta(hours=6), 4.0),
            _anchor(T0 + timedelta(hours=3), 0.0),
        ])


def test_spline_rejects_gaps_between_segments():
    s1 = CurveSegment.between(_anchor(T0, 1.0), _anchor(T0 + timedelta(hours=6), 3.0))
    s2 = CurveSegment.between(
        _anchor(T0 + timedelta(hours=7), 3.0),
        _anchor(T0 + timedelta(hours=12), 0.0),
    )
    with pytest.raises(DegenerateSegment):
        Spline(segments=(s1, s2))


def test_to_records_and_to_numpy():
    anchors = _tides()
    spline = build_spline(anchors)

    records = spline.to_records()
    assert len(records) == 3
    assert set(records[0]) == {"start_unix", "end_unix", "a", "b", "c", "d"}
    assert records[0]["start_unix"] == int(anchors[0].time.timestamp())
    assert records[-1]["end_unix"] == int(anchors[-1].time.timestamp())
    assert records[0]["d"] == anchors[0].height

    bounds, coefs = spline.to_numpy()
    assert bounds.shape == (3, 2)
    assert coefs.shape == (3, 4)
    assert np.allclose(coefs[:, 3], [a.height for a in anchors[:-1]])

    empty_bounds, empty_coefs = Spline().to_numpy()
    assert empty_bounds.shape == (0, 2)
    assert empty_coefs.shape == (0, 4)


def test_segment_across_spring_forward_uses_real_elapsed_time():
    tz = ZoneInfo("America/Los_Angeles")
    first = _anchor(datetime(2021, 3, 14, 0, 0, tzinfo=tz), 0.0, TideKind.LOW)
    second = _anchor(datetime(2021, 3, 14, 6, 0, tzinfo=tz), 6.0, TideKind.HIGH)
    spline = build_spline([first, second])

    # Clocks jump from 02:00 to 03:00, so only five hours pass.
    rec = spline.to_records()[0]
    x = rec["end_unix"] - rec["start_unix"]
    assert x == 5 * 3600
    assert math.isclose(((rec["a"] * x + rec["b"]) * x + rec["c"]) * x + rec["d"], 6.0, abs_tol=1e-9)

    assert math.isclose(spline.height_at(second.time), 6.0, abs_tol=1e-9)
    mid = datetime(2021, 3, 14, 3, 30, tzinfo=tz)
    assert math.isclose(spline.height_at(mid), 3.0, abs_tol=1e-9)

    times = sample_times(spline, 3)
    assert times[1] == mid
    assert times[1].tzinfo is tz
