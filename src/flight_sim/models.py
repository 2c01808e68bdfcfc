"""Data models for the flight simulation.

Race inputs (scripts, stats, race configuration) and the derived results
(progress, flight state, standings rows, stat gains). Every model is frozen:
the simulation never mutates its inputs and recomputes results on demand.
"""

import math
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Optional, Tuple, Union

# Race outcomes
OUTCOME_FINISHED = "finished"
OUTCOME_LOST = "lost"
OUTCOME_INJURED = "injured"
OUTCOME_DEAD = "dead"
OUTCOME_DNF = "dnf"
OUTCOME_RETURNED = "returned"

VALID_OUTCOMES = {
    OUTCOME_FINISHED,
    OUTCOME_LOST,
    OUTCOME_INJURED,
    OUTCOME_DEAD,
    OUTCOME_DNF,
    OUTCOME_RETURNED,
}

# Visual states shown by the map and the standings table
STATE_NORMAL = "normal"
STATE_STRAYED = "strayed"
STATE_OVERSHOT = "overshot"
STATE_LOST = "lost"
STATE_DEAD = "dead"
STATE_FINISHED = "finished"


@dataclass(frozen=True)
class LatLng:
    """Geographic coordinate in decimal degrees."""

    lat: float
    lng: float

    def is_valid(self) -> bool:
        """True when both components are finite and inside lat/lng bounds."""
        try:
            lat = float(self.lat)
            lng = float(self.lng)
        except (TypeError, ValueError):
            return False
        if not (math.isfinite(lat) and math.isfinite(lng)):
            return False
        return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


# Marker position meaning "do not render a moving marker"
INVALID_POSITION = LatLng(float("nan"), float("nan"))


@dataclass(frozen=True)
class WeatherZone:
    """Weather affecting part of the course. Advisory only."""

    type: str
    severity: float
    area: Tuple[LatLng, ...] = ()


# ----------------------------------------------------------------------
# Race events
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class JoinedGroup:
    kind: ClassVar[str] = "joined_group"

    t: float
    group_id: str


@dataclass(frozen=True)
class LeftGroup:
    kind: ClassVar[str] = "left_group"

    t: float


@dataclass(frozen=True)
class Strayed:
    """Pauses progress for ``duration`` seconds starting at ``t``."""

    kind: ClassVar[str] = "strayed"

    t: float
    duration: float


@dataclass(frozen=True)
class Overshot:
    """Flew past the target; ``distance`` meters must be flown back."""

    kind: ClassVar[str] = "overshot"

    t: float
    distance: float


@dataclass(frozen=True)
class Lost:
    kind: ClassVar[str] = "lost"

    t: float


@dataclass(frozen=True)
class Returned:
    kind: ClassVar[str] = "returned"

    t: float


@dataclass(frozen=True)
class Accident:
    kind: ClassVar[str] = "accident"

    t: float


@dataclass(frozen=True)
class Death:
    kind: ClassVar[str] = "death"

    t: float


@dataclass(frozen=True)
class MiracleFinish:
    kind: ClassVar[str] = "miracle_finish"

    t: float


RaceEvent = Union[
    JoinedGroup,
    LeftGroup,
    Strayed,
    Overshot,
    Lost,
    Returned,
    Accident,
    Death,
    MiracleFinish,
]

EVENT_TYPES = (
    JoinedGroup,
    LeftGroup,
    Strayed,
    Overshot,
    Lost,
    Returned,
    Accident,
    Death,
    MiracleFinish,
)


# ----------------------------------------------------------------------
# Race inputs
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class RaceScript:
    """Pre-generated events and terminal outcome for one entity."""

    entity_id: str
    events: Tuple[RaceEvent, ...] = ()
    outcome: str = OUTCOME_DNF
    finish_time: Optional[float] = None  # seconds since race start
    home_base_index: int = 0

    def has_authoritative_finish(self) -> bool:
        """True when the outcome is a finish with a usable finish time."""
        if self.outcome != OUTCOME_FINISHED or self.finish_time is None:
            return False
        return math.isfinite(self.finish_time) and self.finish_time > 0


@dataclass(frozen=True)
class EntityStats:
    """Per-entity attributes on a 0-100 scale, except ``speed`` in m/s."""

    speed: float
    focus: float = 50.0
    navigation: float = 50.0
    sky_iq: float = 50.0
    endurance: float = 50.0
    wind_resistance: float = 50.0
    experience: float = 50.0
    aggression: float = 50.0
    leadership: Optional[float] = None  # hidden
    race_start: Optional[float] = None  # hidden


@dataclass(frozen=True)
class RaceConfig:
    """Immutable per-race constants."""

    start: LatLng
    home_bases: Tuple[LatLng, ...]
    total_distance: float  # meters
    weather_zone: Optional[WeatherZone] = None


# ----------------------------------------------------------------------
# Results
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class ProgressResult:
    """Integrated progress of one entity at a query time."""

    distance_travelled: float
    total_distance: float
    distance_left: float
    velocity: float
    forward_distance: float  # travelled net of overshoot return legs
    overshoot_remaining: float = 0.0
    pause_count: int = 0
    lost: bool = False
    dead: bool = False
    miracle_finish: bool = False
    group_id: Optional[str] = None
    group_overridden: bool = False  # script group events seen


@dataclass(frozen=True)
class FlightState:
    """Renderable state of one entity at a query time."""

    position: LatLng
    group_id: Optional[str]
    state: str
    progress: float = 0.0
    in_weather_zone: bool = False


@dataclass(frozen=True)
class Standing:
    """One leaderboard row."""

    entity_id: str
    velocity: float
    distance_left: float
    speed: float
    state: str
    outcome: str


@dataclass(frozen=True)
class StatGain:
    """Post-race stat increments for one entity."""

    entity_id: str
    experience: float
    racing: float


@dataclass(frozen=True)
class RaceFixture:
    """Everything needed to replay one race."""

    race_id: str
    config: RaceConfig
    scripts: Tuple[RaceScript, ...]
    stats: Dict[str, EntityStats] = field(default_factory=dict)
