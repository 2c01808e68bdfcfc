"""Position synthesizer.

Maps ``(script, stats, t, race_config)`` to a renderable :class:`FlightState`.

Two phases:

* **Loiter** (``t < LOITER_DURATION``): the bird circles the start point.
  Visual state is always ``normal`` here, whatever the script says.
* **Transit**: the bird moves along the straight line from the start to its
  home base, driven by the same progress integration the standings use,
  plus a deterministic stat-driven wobble.
"""

import logging
import math
import zlib
from typing import Optional

from src.flight_sim.config import (
    DEFAULT_LEADERSHIP,
    DEGENERATE_GROUP_ID,
    FALLBACK_BAND,
    GROUP_BANDS,
    GROUP_OFFSET_STEP,
    GROUP_WOBBLE_AMPLITUDE,
    GROUP_WOBBLE_FREQUENCY,
    INDIVIDUAL_OFFSET_STEP,
    INDIVIDUAL_WOBBLE_AMPLITUDE,
    INDIVIDUAL_WOBBLE_FREQUENCY,
    LOITER_ANGULAR_SPEED,
    LOITER_DURATION,
    LOITER_GROUP_ID,
    LOITER_RADIUS,
    LOITER_WOBBLE_AMPLITUDE,
    LOITER_WOBBLE_FREQUENCY,
    STAT_SCALE,
    WOBBLE_MULTIPLIER_MAX,
    WOBBLE_MULTIPLIER_MIN,
)
from src.flight_sim.geo import haversine_distance, interpolate, point_in_polygon
from src.flight_sim.models import (
    INVALID_POSITION,
    STATE_DEAD,
    STATE_FINISHED,
    STATE_LOST,
    STATE_NORMAL,
    STATE_OVERSHOT,
    STATE_STRAYED,
    EntityStats,
    FlightState,
    LatLng,
    ProgressResult,
    RaceConfig,
    RaceScript,
)
from src.flight_sim.progress import ProgressIntegrator, non_negative, sanitize_time
from src.flight_sim.timeline import normalize_timeline

logger = logging.getLogger(__name__)


def resolve_state(
    progress: ProgressResult,
    script: RaceScript,
    t: float,
    route_fraction: float = 0.0,
) -> str:
    """Visual state from the integrator's flags.

    Shared by the map and the standings table so both show the same state
    for the same timestamp. Terminal conditions win over transient ones.
    For a recorded finish, the finish time alone decides arrival, and once
    it has passed it overrides the script's events.
    """
    recorded_finish = script.has_authoritative_finish()
    if recorded_finish and t >= script.finish_time:
        return STATE_FINISHED
    if progress.dead:
        return STATE_DEAD
    if progress.lost:
        return STATE_LOST
    if progress.miracle_finish:
        return STATE_FINISHED
    if not recorded_finish and route_fraction >= 1.0:
        return STATE_FINISHED
    if progress.pause_count > 0:
        return STATE_STRAYED
    if progress.overshoot_remaining > 0:
        return STATE_OVERSHOT
    return STATE_NORMAL


def group_band(stats: EntityStats, home_base_index: int) -> str:
    """Group id from home base and leadership. Never looks at other birds."""
    leadership = stats.leadership if stats.leadership is not None else DEFAULT_LEADERSHIP
    band = FALLBACK_BAND
    for threshold, name in GROUP_BANDS:
        if leadership > threshold:
            band = name
            break
    return f"home{home_base_index}_{band}"


def stable_seed(value: str) -> int:
    """Process-independent hash (``hash()`` is salted per interpreter run)."""
    return zlib.crc32(value.encode("utf-8"))


def wobble_multiplier(stats: EntityStats) -> float:
    """Wobble scale from focus, navigation and sky IQ.

    Disciplined birds fly straighter: discipline 100 gives
    ``WOBBLE_MULTIPLIER_MIN``, discipline 0 gives ``WOBBLE_MULTIPLIER_MAX``.
    """
    values = []
    for value in (stats.focus, stats.navigation, stats.sky_iq):
        try:
            value = float(value)
        except (TypeError, ValueError):
            continue
        if math.isfinite(value):
            values.append(min(max(value, 0.0), STAT_SCALE))
    discipline = sum(values) / len(values) / STAT_SCALE if values else 0.5
    return WOBBLE_MULTIPLIER_MAX - (WOBBLE_MULTIPLIER_MAX - WOBBLE_MULTIPLIER_MIN) * discipline


def loiter_position(start: LatLng, t: float) -> LatLng:
    """Point on the orientation circle around the start at time *t*."""
    angle = t * LOITER_ANGULAR_SPEED
    wobble = math.sin(t * LOITER_WOBBLE_FREQUENCY) * LOITER_WOBBLE_AMPLITUDE
    return LatLng(
        lat=start.lat + LOITER_RADIUS * math.cos(angle) + wobble,
        lng=start.lng + LOITER_RADIUS * math.sin(angle) + wobble * 0.5,
    )


def _apply_wobble(
    base: LatLng,
    entity_id: str,
    group_id: Optional[str],
    stats: EntityStats,
    flight_time: float,
) -> LatLng:
    scale = wobble_multiplier(stats)

    group_offset = 0.0
    group_wobble = 0.0
    if group_id is not None:
        group_seed = stable_seed(group_id)
        group_offset = (group_seed % 3) * GROUP_OFFSET_STEP
        group_wobble = (
            math.sin(flight_time * GROUP_WOBBLE_FREQUENCY + group_seed % 7)
            * GROUP_WOBBLE_AMPLITUDE
        )

    individual_seed = stable_seed(entity_id) % 100
    individual_wobble = (
        math.sin(flight_time * INDIVIDUAL_WOBBLE_FREQUENCY + individual_seed)
        * INDIVIDUAL_WOBBLE_AMPLITUDE
    )
    individual_offset = (individual_seed - 50) * INDIVIDUAL_OFFSET_STEP

    d_lat = group_offset + group_wobble + individual_wobble + individual_offset
    d_lng = (
        group_offset * 0.5
        + group_wobble * 0.3
        + individual_wobble * 0.5
        + individual_offset * 0.3
    )
    return LatLng(lat=base.lat + d_lat * scale, lng=base.lng + d_lng * scale)


def _degenerate(start: Optional[LatLng], reason: str, entity_id: str) -> FlightState:
    logger.warning("Degenerate flight state for entity %s: %s", entity_id, reason)
    position = start if start is not None and start.is_valid() else LatLng(0.0, 0.0)
    return FlightState(position=position, group_id=DEGENERATE_GROUP_ID, state=STATE_NORMAL)


def _in_weather_zone(position: LatLng, race_config: RaceConfig) -> bool:
    zone = race_config.weather_zone
    if zone is None:
        return False
    return point_in_polygon(position, zone.area)


def compute_flight_state(
    script: RaceScript,
    stats: Optional[EntityStats],
    t: float,
    race_config: RaceConfig,
    speed_factor: float = 1.0,
) -> FlightState:
    """Renderable position, group and visual state of one entity at *t*.

    Dead and unresolved-lost entities get ``INVALID_POSITION`` (NaN), the
    signal for "do not render a moving marker". Invalid inputs never raise:
    they fall back to the start position.

    ``speed_factor`` multiplies the base speed for demo playback on the map.
    Real races use 1; invalid factors count as 0.
    """
    t = sanitize_time(t)
    start = race_config.start

    if start is None or not start.is_valid():
        return _degenerate(start, "invalid start coordinate", script.entity_id)
    if stats is None:
        return _degenerate(start, "missing stats", script.entity_id)
    if not race_config.home_bases:
        return _degenerate(start, "race has no home bases", script.entity_id)

    home_index = script.home_base_index
    if not 0 <= home_index < len(race_config.home_bases):
        logger.warning(
            "Home base index %s out of range for entity %s, using 0",
            home_index, script.entity_id,
        )
        home_index = 0
    home = race_config.home_bases[home_index]
    if home is None or not home.is_valid():
        return _degenerate(start, "invalid home coordinate", script.entity_id)

    if t < LOITER_DURATION:
        position = loiter_position(start, t)
        return FlightState(
            position=position,
            group_id=LOITER_GROUP_ID,
            state=STATE_NORMAL,
            progress=0.0,
            in_weather_zone=_in_weather_zone(position, race_config),
        )

    flight_time = t - LOITER_DURATION
    route_distance = haversine_distance(start, home)

    integrator = ProgressIntegrator(
        non_negative(stats.speed) * non_negative(speed_factor),
        route_distance,
        departure=LOITER_DURATION,
        entity_id=script.entity_id,
    )
    result = integrator.integrate(normalize_timeline(script), t)

    if route_distance > 0:
        fraction = min(1.0, result.forward_distance / route_distance)
    else:
        fraction = 1.0
    group_id = result.group_id if result.group_overridden else group_band(stats, home_index)
    state = resolve_state(result, script, t, route_fraction=fraction)
    if state == STATE_FINISHED:
        fraction = 1.0

    if state in (STATE_DEAD, STATE_LOST):
        return FlightState(
            position=INVALID_POSITION,
            group_id=group_id,
            state=state,
            progress=fraction,
        )

    base = interpolate(start, home, fraction)
    position = _apply_wobble(base, script.entity_id, group_id, stats, flight_time)
    if not position.is_valid():
        position = base

    return FlightState(
        position=position,
        group_id=group_id,
        state=state,
        progress=fraction,
        in_weather_zone=_in_weather_zone(position, race_config),
    )
