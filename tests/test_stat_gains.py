"""Tests for post-race stat gains."""

import pytest

from src.flight_sim.config import FINISH_GAIN, PARTICIPATION_GAIN
from src.flight_sim.models import RaceScript, StatGain
from src.flight_sim.stat_gains import compute_stat_gains


def _make_script(entity_id, outcome):
    return RaceScript(entity_id=entity_id, outcome=outcome)


class TestComputeStatGains:
    def test_finisher_gets_full_gain(self):
        gains = compute_stat_gains([_make_script("1", "finished")])
        assert gains == [StatGain(entity_id="1", experience=FINISH_GAIN, racing=FINISH_GAIN)]

    @pytest.mark.parametrize("outcome", ["dnf", "lost", "returned"])
    def test_participants_get_small_gain(self, outcome):
        (gain,) = compute_stat_gains([_make_script("1", outcome)])
        assert gain.experience == pytest.approx(0.04)
        assert gain.racing == pytest.approx(PARTICIPATION_GAIN)

    @pytest.mark.parametrize("outcome", ["dead", "injured"])
    def test_dead_and_injured_are_excluded(self, outcome):
        assert compute_stat_gains([_make_script("1", outcome)]) == []

    def test_script_order_is_kept(self):
        scripts = [
            _make_script("c", "dnf"),
            _make_script("a", "dead"),
            _make_script("b", "finished"),
        ]
        gains = compute_stat_gains(scripts)
        assert [gain.entity_id for gain in gains] == ["c", "b"]

    def test_custom_gain_table(self):
        table = {"finished": (1.0, 0.0), "dnf": (0.0, 0.0)}
        scripts = [_make_script("1", "finished"), _make_script("2", "dnf")]
        gains = compute_stat_gains(scripts, gain_table=table)
        assert gains == [StatGain(entity_id="1", experience=1.0, racing=0.0)]

    def test_empty_race(self):
        assert compute_stat_gains([]) == []

    def test_fixture_race(self, race_fixture):
        gains = compute_stat_gains(race_fixture.scripts)
        assert {gain.entity_id for gain in gains} == {"p1", "p2"}
        assert gains[0].experience == pytest.approx(0.12)
