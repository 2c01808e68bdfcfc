"""Progress integrator.

Sweeps a normalized timeline up to a query time and integrates the distance
an entity has flown. Progress only accrues while the entity is active:

    pause_count == 0 and not lost and not dead

Both the position synthesizer and the standings aggregator read their
numbers from here, which keeps the map and the leaderboard in agreement.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional

from src.flight_sim.models import (
    Accident,
    Death,
    JoinedGroup,
    LeftGroup,
    Lost,
    MiracleFinish,
    Overshot,
    ProgressResult,
    Returned,
    Strayed,
)
from src.flight_sim.timeline import StrayedEnd, TimelineEntry

logger = logging.getLogger(__name__)


def sanitize_time(t) -> float:
    """Clamp a query time to a finite, non-negative float (bad input -> 0)."""
    try:
        t = float(t)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(t) or t < 0:
        return 0.0
    return t


def non_negative(value) -> float:
    """Finite, non-negative float or 0.0 (speeds, distances, durations)."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


@dataclass
class _Sweep:
    """Mutable bookkeeping for a single integration pass."""

    total_distance: float
    travelled: float = 0.0
    overshoot_debt: float = 0.0
    overshoot_repaid: float = 0.0
    pause_count: int = 0
    lost: bool = False
    dead: bool = False
    miracle_finish: bool = False
    group_id: Optional[str] = None
    group_overridden: bool = False

    def is_active(self) -> bool:
        return (
            self.pause_count == 0
            and not self.lost
            and not self.dead
            and not self.miracle_finish
        )


class ProgressIntegrator:
    """Integrate distance flown for one entity.

    Args:
        base_speed: Ground speed in m/s. Invalid values count as 0.
        total_distance: Baseline distance to cover in meters; grows with
            every ``Overshot``.
        departure: Race time before which no distance accrues (the map
            uses the end of the loiter phase; standings use 0).
        entity_id: Only used for log messages.
    """

    def __init__(
        self,
        base_speed: float,
        total_distance: float,
        departure: float = 0.0,
        entity_id: Optional[str] = None,
    ):
        self.base_speed = non_negative(base_speed)
        self.total_distance = non_negative(total_distance)
        self.departure = non_negative(departure)
        self.entity_id = entity_id

    def integrate(self, timeline: Iterable[TimelineEntry], t: float) -> ProgressResult:
        """Progress at race time *t* (seconds since race start)."""
        t = sanitize_time(t)
        sweep = _Sweep(total_distance=self.total_distance)

        cursor = 0.0
        for entry in timeline:
            if entry.t > t:
                break
            self._accrue(sweep, cursor, entry.t)
            cursor = max(cursor, entry.t)
            self._apply(sweep, entry)
        self._accrue(sweep, cursor, t)

        travelled = min(sweep.travelled, sweep.total_distance)
        forward = max(travelled - sweep.overshoot_repaid, 0.0)

        return ProgressResult(
            distance_travelled=travelled,
            total_distance=sweep.total_distance,
            distance_left=max(sweep.total_distance - travelled, 0.0),
            velocity=travelled / t if t > 0 else 0.0,
            forward_distance=forward,
            overshoot_remaining=sweep.overshoot_debt,
            pause_count=sweep.pause_count,
            lost=sweep.lost,
            dead=sweep.dead,
            miracle_finish=sweep.miracle_finish,
            group_id=sweep.group_id,
            group_overridden=sweep.group_overridden,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _accrue(self, sweep: _Sweep, start: float, end: float):
        """Add the distance flown over ``[start, end]`` if the entity is active."""
        start = max(start, self.departure)
        if end <= start or not sweep.is_active():
            return

        gained = self.base_speed * (end - start)
        if sweep.overshoot_debt > 0:
            # The return leg after an overshoot is flown first
            repaid = min(sweep.overshoot_debt, gained)
            sweep.overshoot_debt -= repaid
            sweep.overshoot_repaid += repaid
        sweep.travelled += gained

    def _apply(self, sweep: _Sweep, entry: TimelineEntry):
        event = entry.event

        if sweep.dead or sweep.miracle_finish:
            logger.debug(
                "Ignoring %s at t=%s for entity %s: race already over",
                event.kind, entry.t, self.entity_id,
            )
            return

        if isinstance(event, StrayedEnd):
            sweep.pause_count = max(0, sweep.pause_count - 1)
        elif isinstance(event, Returned):
            sweep.lost = False
        elif isinstance(event, Lost):
            sweep.lost = True
        elif isinstance(event, (Accident, Death)):
            sweep.dead = True
        elif isinstance(event, Strayed):
            sweep.pause_count += 1
        elif isinstance(event, Overshot):
            extra = non_negative(event.distance)
            sweep.total_distance += extra
            sweep.overshoot_debt += extra
        elif isinstance(event, MiracleFinish):
            sweep.miracle_finish = True
            sweep.travelled = sweep.total_distance
            sweep.overshoot_repaid += sweep.overshoot_debt
            sweep.overshoot_debt = 0.0
        elif isinstance(event, JoinedGroup):
            sweep.group_id = event.group_id
            sweep.group_overridden = True
        elif isinstance(event, LeftGroup):
            sweep.group_id = None
            sweep.group_overridden = True
        else:
            raise TypeError(f"Unhandled timeline event type: {type(event).__name__}")


def integrate_progress(
    timeline: Iterable[TimelineEntry],
    base_speed: float,
    total_distance: float,
    t: float,
    departure: float = 0.0,
    entity_id: Optional[str] = None,
) -> ProgressResult:
    """Functional wrapper around :class:`ProgressIntegrator`."""
    integrator = ProgressIntegrator(
        base_speed, total_distance, departure=departure, entity_id=entity_id
    )
    return integrator.integrate(timeline, t)
