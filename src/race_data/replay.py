"""Replay sampling: evaluate a race on a time grid for tables and charts.

The simulation itself holds no timers; a replay is just the pure functions
called once per sampled timestamp.
"""

import logging
import math
from typing import Iterable, List

import pandas as pd

from src.flight_sim.config import LOITER_DURATION
from src.flight_sim.flight_state import compute_flight_state
from src.flight_sim.models import RaceFixture
from src.flight_sim.standings import STANDINGS_COLUMNS, compute_standings, standings_to_frame
from src.flight_sim.timeline import normalize_timeline
from src.race_data.config import DEFAULT_REPLAY_STEP

logger = logging.getLogger(__name__)

FLIGHT_PATH_COLUMNS = [
    "t", "entity_id", "lat", "lng", "group_id", "state", "progress", "in_weather_zone",
]


def replay_duration(fixture: RaceFixture) -> float:
    """Last race time worth showing: every finish and event, or the loiter end."""
    latest = LOITER_DURATION
    for script in fixture.scripts:
        if script.finish_time is not None and math.isfinite(script.finish_time):
            latest = max(latest, script.finish_time)
        for entry in normalize_timeline(script):
            latest = max(latest, entry.t)
    return latest


def time_grid(duration: float, step: float = DEFAULT_REPLAY_STEP) -> List[float]:
    """Evenly spaced times from 0 to *duration*, always including the end."""
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    if duration <= 0:
        return [0.0]

    count = int(duration // step)
    times = [i * step for i in range(count + 1)]
    if times[-1] < duration:
        times.append(float(duration))
    return times


def sample_standings(fixture: RaceFixture, times: Iterable[float]) -> pd.DataFrame:
    """Standings at every time in *times*, one row per (time, entity)."""
    frames = []
    for t in times:
        standings = compute_standings(fixture.scripts, fixture.stats, t, fixture.config)
        frame = standings_to_frame(standings)
        frame.insert(0, "t", float(t))
        frames.append(frame)

    if not frames:
        return pd.DataFrame(columns=["t"] + STANDINGS_COLUMNS)

    result = pd.concat(frames, ignore_index=True)
    logger.debug(
        "Sampled standings for race %s: %d rows", fixture.race_id, len(result)
    )
    return result


def sample_flight_paths(fixture: RaceFixture, times: Iterable[float]) -> pd.DataFrame:
    """Map positions at every time in *times*.

    Dead and lost birds keep their NaN positions so a renderer can tell
    "hide marker" apart from "no sample".
    """
    records = []
    for t in times:
        for script in fixture.scripts:
            state = compute_flight_state(
                script, fixture.stats.get(script.entity_id), t, fixture.config
            )
            records.append(
                {
                    "t": float(t),
                    "entity_id": script.entity_id,
                    "lat": state.position.lat,
                    "lng": state.position.lng,
                    "group_id": state.group_id,
                    "state": state.state,
                    "progress": state.progress,
                    "in_weather_zone": state.in_weather_zone,
                }
            )
    return pd.DataFrame(records, columns=FLIGHT_PATH_COLUMNS)
