"""Replay a stored race and report its standings.

Usage:
    python -m src.race_data.run_replay <race_file> [t] [step]

Examples:
    python -m src.race_data.run_replay data/races/race_spring-open.json
    python -m src.race_data.run_replay data/races/race_spring-open.json 600 30
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from src.flight_sim.standings import compute_standings, standings_to_frame
from src.flight_sim.stat_gains import compute_stat_gains
from src.logging_config import setup_logging
from src.race_data.config import DEFAULT_REPLAY_STEP, REPORTS_DIR
from src.race_data.race_loader import RaceFileStore
from src.race_data.replay import replay_duration, sample_standings, time_grid

logger = logging.getLogger(__name__)


def run_replay(
    race_file: Path,
    t: Optional[float] = None,
    step: float = DEFAULT_REPLAY_STEP,
    output_dir: Optional[Path] = None,
) -> Path:
    """Replay a race file and write the sampled standings to CSV.

    Args:
        race_file: Path to a race JSON file.
        t: Race time for the printed snapshot. Defaults to the end of the
            race.
        step: Seconds between sampled rows in the CSV.
        output_dir: Directory for the CSV. Defaults to ``data/reports/``.

    Returns:
        Path to the generated CSV file.

    Raises:
        FileNotFoundError: If the race file doesn't exist.
        RaceDataError: If the race file is malformed.
    """
    if output_dir is None:
        output_dir = REPORTS_DIR

    fixture = RaceFileStore.load_file(Path(race_file))
    duration = replay_duration(fixture)
    if t is None:
        t = duration

    logger.info(
        "Replaying race %s: %d entities, %.0fs", fixture.race_id, len(fixture.scripts), duration
    )

    # 1. Snapshot
    snapshot = standings_to_frame(
        compute_standings(fixture.scripts, fixture.stats, t, fixture.config)
    )
    logger.info("Standings at t=%.0fs:\n%s", t, snapshot.to_string(index=False))

    # 2. Time series
    times = time_grid(duration, step)
    samples = sample_standings(fixture, times)

    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / f"standings_{fixture.race_id}.csv"
    samples.to_csv(output_file, index=False)

    # 3. Rewards
    gains = compute_stat_gains(fixture.scripts)
    for gain in gains:
        logger.info(
            "  %s: +%.2f experience, +%.2f racing",
            gain.entity_id, gain.experience, gain.racing,
        )

    logger.info(
        "Replay complete! %d samples over %d timestamps -> %s",
        len(samples), len(times), output_file,
    )
    return output_file


if __name__ == "__main__":
    setup_logging()

    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)

    race_file = Path(sys.argv[1])
    t = float(sys.argv[2]) if len(sys.argv) > 2 else None
    step = float(sys.argv[3]) if len(sys.argv) > 3 else DEFAULT_REPLAY_STEP

    try:
        output = run_replay(race_file, t=t, step=step)
        print(f"Replay complete: {output}")
    except Exception:
        logger.exception("Replay failed")
        sys.exit(1)
