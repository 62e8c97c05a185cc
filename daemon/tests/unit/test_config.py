#!/usr/bin/env python3
"""Test suite for config.py - defaults, env overrides and validation."""

from datetime import timedelta

import pytest

from config import (
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
    FixtureConfig,
    LIGHT_CHARACTERISTIC_UUID,
    load_config,
)

ENV_VARS = [
    "LATITUDE",
    "LONGITUDE",
    "HASS_LATITUDE",
    "HASS_LONGITUDE",
    "LIGHT_NAME_FILTER",
    "SCAN_TIMEOUT",
    "CYCLE_INTERVAL_MS",
    "IDLE_INTERVAL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for k in ENV_VARS:
        monkeypatch.delenv(k, raising=False)


def test_defaults():
    config = load_config()

    assert config.latitude == DEFAULT_LATITUDE
    assert config.longitude == DEFAULT_LONGITUDE
    assert config.name_filter == "Light"
    assert config.characteristic_uuid == LIGHT_CHARACTERISTIC_UUID
    assert config.magic == 0x3C
    assert config.scan_timeout == 2.0
    assert config.cycle_interval == 0.01
    assert config.idle_interval == 60.0
    assert config.check_interval == timedelta(minutes=2)
    assert config.start_hue == 1.0


def test_characteristic_is_16_bit_0x1001():
    assert LIGHT_CHARACTERISTIC_UUID == "00001001-0000-1000-8000-00805f9b34fb"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("LATITUDE", "51.5")
    monkeypatch.setenv("LONGITUDE", "-0.12")
    monkeypatch.setenv("LIGHT_NAME_FILTER", "Lamp")
    monkeypatch.setenv("SCAN_TIMEOUT", "5")
    monkeypatch.setenv("CYCLE_INTERVAL_MS", "20")
    monkeypatch.setenv("IDLE_INTERVAL", "30")

    config = load_config()

    assert config.latitude == 51.5
    assert config.longitude == -0.12
    assert config.name_filter == "Lamp"
    assert config.scan_timeout == 5.0
    assert config.cycle_interval == 0.02
    assert config.idle_interval == 30.0


def test_hass_style_location(monkeypatch):
    monkeypatch.setenv("HASS_LATITUDE", "37.7749")
    monkeypatch.setenv("HASS_LONGITUDE", "-122.4194")

    config = load_config()

    assert config.latitude == 37.7749
    assert config.longitude == -122.4194


def test_explicit_overrides_win(monkeypatch):
    monkeypatch.setenv("LATITUDE", "51.5")
    config = load_config({"latitude": 10.0})
    assert config.latitude == 10.0


def test_non_numeric_value(monkeypatch):
    monkeypatch.setenv("LONGITUDE", "east")
    with pytest.raises(ValueError, match="LONGITUDE"):
        load_config()


@pytest.mark.parametrize("kwargs", [
    {"latitude": 91.0},
    {"longitude": -181.0},
    {"magic": 0x100},
    {"scan_timeout": 0},
    {"idle_interval": -1.0},
    {"check_interval": timedelta(0)},
    {"name_filter": ""},
])
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        FixtureConfig(**kwargs)


def test_config_is_immutable():
    config = FixtureConfig()
    with pytest.raises(AttributeError):
        config.latitude = 0.0
