"""Tests for src.race_data.run_replay (load, sample and report a race)."""

import pandas as pd
import pytest

from src.flight_sim.standings import STANDINGS_COLUMNS
from src.race_data.race_loader import RaceDataError, RaceFileStore
from src.race_data.run_replay import run_replay


class TestRunReplay:
    """End-to-end runs against a race saved to a temp directory."""

    @pytest.fixture
    def race_file(self, tmp_path, race_fixture):
        return RaceFileStore(storage_dir=tmp_path / "races").save_race(race_fixture)

    def test_writes_standings_csv(self, tmp_path, race_file):
        output = run_replay(race_file, step=100.0, output_dir=tmp_path / "reports")

        assert output == tmp_path / "reports" / "standings_spring-open.csv"
        assert output.exists()

    def test_csv_contents(self, tmp_path, race_file):
        output = run_replay(race_file, step=100.0, output_dir=tmp_path / "reports")
        df = pd.read_csv(output)

        assert list(df.columns) == ["t"] + STANDINGS_COLUMNS
        # 0, 100, ..., 900 plus the final 950
        assert df["t"].nunique() == 11
        assert len(df) == 33

    def test_final_sample_matches_outcomes(self, tmp_path, race_file):
        output = run_replay(race_file, step=100.0, output_dir=tmp_path / "reports")
        df = pd.read_csv(output)
        final = df[df["t"] == 950.0].set_index("entity_id")

        assert final.loc["p1", "state"] == "finished"
        assert final.loc["p3", "state"] == "dead"
        assert final.loc["p1", "rank"] == 1

    def test_snapshot_logged(self, tmp_path, race_file, caplog):
        with caplog.at_level("INFO"):
            run_replay(race_file, t=300.0, output_dir=tmp_path / "reports")
        assert "Standings at t=300s" in caplog.text
        assert "+0.12 experience" in caplog.text

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            run_replay(tmp_path / "absent.json", output_dir=tmp_path)

    def test_malformed_file_raises(self, tmp_path):
        bad = tmp_path / "race_bad.json"
        bad.write_text('{"race_id": "bad"}')
        with pytest.raises(RaceDataError):
            run_replay(bad, output_dir=tmp_path)
