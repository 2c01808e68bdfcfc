"""Standings aggregator.

Runs the progress integrator over every entity in a race and ranks the
result by velocity. A pure function of its inputs, so any timestamp can be
replayed and calling it twice yields equal rows.
"""

import logging
from typing import Dict, List, Optional, Sequence

import pandas as pd

from src.flight_sim.flight_state import resolve_state
from src.flight_sim.models import (
    EntityStats,
    RaceConfig,
    RaceScript,
    Standing,
)
from src.flight_sim.progress import ProgressIntegrator, non_negative, sanitize_time
from src.flight_sim.timeline import normalize_timeline

logger = logging.getLogger(__name__)

STANDINGS_COLUMNS = [
    "rank", "entity_id", "velocity", "distance_left", "speed", "state", "outcome",
]


def compute_standing(
    script: RaceScript,
    stats: Optional[EntityStats],
    t: float,
    race_config: RaceConfig,
) -> Standing:
    """Leaderboard row for a single entity at race time *t*."""
    t = sanitize_time(t)
    total_distance = non_negative(race_config.total_distance)

    if stats is None:
        logger.warning(
            "No stats for entity %s; reporting zero velocity", script.entity_id
        )
        base_speed = 0.0
    else:
        base_speed = stats.speed

    integrator = ProgressIntegrator(
        base_speed, total_distance, entity_id=script.entity_id
    )
    result = integrator.integrate(normalize_timeline(script), t)

    fraction = 1.0 if result.total_distance > 0 and result.distance_left <= 0 else 0.0
    # Same rule as the map, including the finish_time gate for recorded finishes
    state = resolve_state(result, script, t, route_fraction=fraction)

    if script.has_authoritative_finish():
        # A recorded finish is never re-simulated
        velocity = total_distance / script.finish_time
        return Standing(
            entity_id=script.entity_id,
            velocity=velocity,
            distance_left=0.0,
            speed=velocity,
            state=state,
            outcome=script.outcome,
        )

    return Standing(
        entity_id=script.entity_id,
        velocity=result.velocity,
        distance_left=result.distance_left,
        speed=integrator.base_speed,
        state=state,
        outcome=script.outcome,
    )


def compute_standings(
    scripts: Sequence[RaceScript],
    stats: Dict[str, EntityStats],
    t: float,
    race_config: RaceConfig,
) -> List[Standing]:
    """Ranked snapshot of every entity at race time *t*.

    Rows are sorted by velocity, fastest first. The sort is stable: entities
    with equal velocity (e.g. everyone at ``t == 0``) keep their input order.
    """
    rows = [
        compute_standing(script, stats.get(script.entity_id), t, race_config)
        for script in scripts
    ]
    return sorted(rows, key=lambda row: row.velocity, reverse=True)


def standings_to_frame(standings: Sequence[Standing]) -> pd.DataFrame:
    """Tabular view of ranked standings with a 1-based ``rank`` column."""
    records = [
        {
            "rank": rank,
            "entity_id": row.entity_id,
            "velocity": row.velocity,
            "distance_left": row.distance_left,
            "speed": row.speed,
            "state": row.state,
            "outcome": row.outcome,
        }
        for rank, row in enumerate(standings, start=1)
    ]
    return pd.DataFrame(records, columns=STANDINGS_COLUMNS)
