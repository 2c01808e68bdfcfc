from src.race_data.race_loader import RaceDataError, RaceFileStore
from src.race_data.replay import (
    replay_duration,
    sample_flight_paths,
    sample_standings,
    time_grid,
)

__all__ = [
    "RaceDataError",
    "RaceFileStore",
    "replay_duration",
    "sample_flight_paths",
    "sample_standings",
    "time_grid",
]
