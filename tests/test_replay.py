"""Tests for replay sampling on a time grid."""

import math

import pytest

from src.flight_sim.models import RaceFixture, RaceScript, Strayed
from src.race_data.replay import (
    FLIGHT_PATH_COLUMNS,
    replay_duration,
    sample_flight_paths,
    sample_standings,
    time_grid,
)


# ── Duration ─────────────────────────────────────────────────────────


class TestReplayDuration:
    def test_longest_finish_or_event(self, race_fixture):
        assert replay_duration(race_fixture) == pytest.approx(950.0)

    def test_stray_end_counts(self, race_fixture):
        late_stray = RaceScript(
            entity_id="p4", events=(Strayed(t=1000.0, duration=200.0),)
        )
        fixture = RaceFixture(
            race_id="late",
            config=race_fixture.config,
            scripts=race_fixture.scripts + (late_stray,),
            stats=race_fixture.stats,
        )
        assert replay_duration(fixture) == pytest.approx(1200.0)

    def test_empty_race_covers_loiter(self, race_fixture):
        fixture = RaceFixture(
            race_id="empty", config=race_fixture.config, scripts=()
        )
        assert replay_duration(fixture) == pytest.approx(30.0)


# ── Time grid ────────────────────────────────────────────────────────


class TestTimeGrid:
    def test_includes_end(self):
        assert time_grid(130.0, 60.0) == [0.0, 60.0, 120.0, 130.0]

    def test_exact_multiple(self):
        assert time_grid(120.0, 60.0) == [0.0, 60.0, 120.0]

    def test_zero_duration(self):
        assert time_grid(0.0, 60.0) == [0.0]

    @pytest.mark.parametrize("step", [0.0, -1.0])
    def test_non_positive_step_raises(self, step):
        with pytest.raises(ValueError, match="step must be positive"):
            time_grid(100.0, step)


# ── Sampling ─────────────────────────────────────────────────────────


class TestSampleStandings:
    def test_one_row_per_time_and_entity(self, race_fixture):
        df = sample_standings(race_fixture, [0.0, 300.0, 600.0])
        assert len(df) == 9
        assert df.columns[0] == "t"
        assert sorted(df["t"].unique().tolist()) == [0.0, 300.0, 600.0]

    def test_ranks_restart_per_time(self, race_fixture):
        df = sample_standings(race_fixture, [100.0, 200.0])
        assert df[df["t"] == 200.0]["rank"].tolist() == [1, 2, 3]

    def test_no_times(self, race_fixture):
        df = sample_standings(race_fixture, [])
        assert df.empty
        assert df.columns[0] == "t"


class TestSampleFlightPaths:
    def test_columns_and_rows(self, race_fixture):
        df = sample_flight_paths(race_fixture, [0.0, 500.0])
        assert list(df.columns) == FLIGHT_PATH_COLUMNS
        assert len(df) == 6

    def test_loiter_rows(self, race_fixture):
        df = sample_flight_paths(race_fixture, [10.0])
        assert set(df["group_id"]) == {"loitering"}
        assert set(df["state"]) == {"normal"}

    def test_dead_bird_keeps_nan_position(self, race_fixture):
        df = sample_flight_paths(race_fixture, [500.0])
        dead = df[df["entity_id"] == "p3"].iloc[0]
        assert dead["state"] == "dead"
        assert math.isnan(dead["lat"])
        assert math.isnan(dead["lng"])

    def test_groups_follow_leadership(self, race_fixture):
        df = sample_flight_paths(race_fixture, [500.0])
        groups = dict(zip(df["entity_id"], df["group_id"]))
        assert groups == {
            "p1": "home0_leaders",
            "p2": "home0_followers",
            "p3": "home0_main",
        }
