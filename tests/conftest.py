"""Shared fixtures for the flight simulation test suite."""

import pytest

from src.flight_sim.models import (
    Death,
    EntityStats,
    LatLng,
    RaceConfig,
    RaceFixture,
    RaceScript,
    Strayed,
    WeatherZone,
)


# ------------------------------------------------------------------
# Lightweight factories – cheap to construct, no I/O
# ------------------------------------------------------------------

def _make_race_config(**overrides):
    defaults = {
        "start": LatLng(0.0, 0.0),
        "home_bases": (LatLng(1.0, 1.0),),
        "total_distance": 1000.0,
        "weather_zone": WeatherZone(
            type="wind",
            severity=0.5,
            area=(LatLng(-0.5, -0.5), LatLng(-0.5, 0.5), LatLng(0.5, 0.5), LatLng(0.5, -0.5)),
        ),
    }
    defaults.update(overrides)
    return RaceConfig(**defaults)


def _make_stats(**overrides):
    defaults = {
        "speed": 1.0,
        "focus": 50.0,
        "navigation": 50.0,
        "sky_iq": 50.0,
        "endurance": 50.0,
        "wind_resistance": 50.0,
        "experience": 50.0,
    }
    defaults.update(overrides)
    return EntityStats(**defaults)


def _make_script(entity_id="1", events=(), outcome="dnf", **overrides):
    return RaceScript(entity_id=entity_id, events=tuple(events), outcome=outcome, **overrides)


@pytest.fixture
def race_config():
    return _make_race_config()


@pytest.fixture
def base_stats():
    """Speed 1 m/s so distances equal elapsed seconds."""
    return _make_stats()


@pytest.fixture
def race_fixture():
    """Small three-bird race: one finisher, one stray, one death."""
    scripts = (
        _make_script("p1", outcome="finished", finish_time=950.0),
        _make_script("p2", events=[Strayed(t=100.0, duration=50.0)], outcome="dnf"),
        _make_script("p3", events=[Death(t=200.0)], outcome="dead"),
    )
    stats = {
        "p1": _make_stats(speed=1.2, leadership=80.0),
        "p2": _make_stats(speed=1.0),
        "p3": _make_stats(speed=1.1, leadership=60.0),
    }
    return RaceFixture(
        race_id="spring-open",
        config=_make_race_config(),
        scripts=scripts,
        stats=stats,
    )
