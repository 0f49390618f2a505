# test/test_config.py
from datetime import timedelta

import pytest

from surfwindow.config import SurfConfig, load_config, merge_dicts
from surfwindow.core import InvalidConfig, ThresholdOptions
from surfwindow.io.sun import SANTA_CRUZ, Place


def test_defaults():
    cfg = load_config()
    assert cfg == SurfConfig()
    assert cfg.step == timedelta(minutes=5)
    assert cfg.twilight == timedelta(minutes=30)
    assert cfg.thresholds == ThresholdOptions()
    assert cfg.cache_ttl == timedelta(hours=12)
    assert cfg.station == 9413745
    assert cfg.place == SANTA_CRUZ
    assert cfg.sun_data_dir == "~/.cache/surfwindow"


def test_from_mapping_overrides_only_given_keys():
    cfg = SurfConfig.from_mapping({
        "scan": {"twilight_minutes": 45},
        "thresholds": {"high_tide": 2.0},
        "noaa": {"station": "9414290"},
        "place": {"latitude": 37.8, "longitude": -122.47},
    })
    assert cfg.step == timedelta(minutes=5)
    assert cfg.twilight == timedelta(minutes=45)
    assert cfg.thresholds == ThresholdOptions(high_tide=2.0)
    assert cfg.station == 9414290
    assert cfg.place == Place(37.8, -122.47, "America/Los_Angeles")


def test_load_config_from_toml(tmp_path):
    path = tmp_path / "surf.toml"
    path.write_text(
        "[scan]\n"
        "step_minutes = 10\n"
        "\n"
        "[thresholds]\n"
        "low_tide = -0.5\n"
        "high_tide = 1.5\n"
        "\n"
        "[cache]\n"
        "ttl_hours = 6\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.step == timedelta(minutes=10)
    assert cfg.thresholds.resolve().low_tide == -0.5
    assert cfg.thresholds.resolve().high_tide == 1.5
    assert cfg.cache_ttl == timedelta(hours=6)
    assert cfg.sweep_interval == timedelta(hours=1)


def test_load_config_errors(tmp_path):
    with pytest.raises(InvalidConfig):
        load_config(tmp_path / "missing.toml")

    bad = tmp_path / "bad.toml"
    bad.write_text("[scan\nstep_minutes = ", encoding="utf-8")
    with pytest.raises(InvalidConfig):
        load_config(bad)


@pytest.mark.parametrize(
    "data",
    [
        {"scan": {"step_minutes": 0}},
        {"scan": {"step_minutes": "often"}},
        {"scan": {"twilight_minutes": -5}},
        {"thresholds": {"high_tide": "knee high"}},
        {"cache": {"ttl_hours": 0}},
        {"noaa": "9413745"},
        {"place": {"latitude": 95.0}},
        {"place": {"timezone": "Mars/Olympus_Mons"}},
    ],
)
def test_from_mapping_rejects_invalid_values(data):
    with pytest.raises(InvalidConfig):
        SurfConfig.from_mapping(data)


def test_merge_dicts_is_recursive_and_non_mutating():
    a = {"scan": {"step_minutes": 5, "twilight_minutes": 30}, "x": 1}
    b = {"scan": {"step_minutes": 10}, "y": 2}
    out = merge_dicts(a, b)
    assert out == {"scan": {"step_minutes": 10, "twilight_minutes": 30}, "x": 1, "y": 2}
    assert a["scan"]["step_minutes"] == 5
