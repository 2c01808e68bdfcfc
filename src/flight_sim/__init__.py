from src.flight_sim.flight_state import compute_flight_state
from src.flight_sim.geo import haversine_distance
from src.flight_sim.models import (
    INVALID_POSITION,
    Accident,
    Death,
    EntityStats,
    FlightState,
    JoinedGroup,
    LatLng,
    LeftGroup,
    Lost,
    MiracleFinish,
    Overshot,
    ProgressResult,
    RaceConfig,
    RaceEvent,
    RaceFixture,
    RaceScript,
    Returned,
    Standing,
    StatGain,
    Strayed,
    WeatherZone,
)
from src.flight_sim.progress import ProgressIntegrator, integrate_progress
from src.flight_sim.standings import compute_standings, standings_to_frame
from src.flight_sim.stat_gains import compute_stat_gains
from src.flight_sim.timeline import normalize_timeline

__all__ = [
    "INVALID_POSITION",
    "Accident",
    "Death",
    "EntityStats",
    "FlightState",
    "JoinedGroup",
    "LatLng",
    "LeftGroup",
    "Lost",
    "MiracleFinish",
    "Overshot",
    "ProgressIntegrator",
    "ProgressResult",
    "RaceConfig",
    "RaceEvent",
    "RaceFixture",
    "RaceScript",
    "Returned",
    "Standing",
    "StatGain",
    "Strayed",
    "WeatherZone",
    "compute_flight_state",
    "compute_standings",
    "compute_stat_gains",
    "haversine_distance",
    "integrate_progress",
    "normalize_timeline",
    "standings_to_frame",
]
