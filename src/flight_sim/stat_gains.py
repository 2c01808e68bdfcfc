"""Post-race stat gains, computed once after a race concludes."""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from src.flight_sim.config import STAT_GAIN_TABLE
from src.flight_sim.models import RaceScript, StatGain

logger = logging.getLogger(__name__)


def compute_stat_gains(
    scripts: Sequence[RaceScript],
    gain_table: Optional[Dict[str, Tuple[float, float]]] = None,
) -> List[StatGain]:
    """Experience and racing increments per entity, in script order.

    Args:
        scripts: All race scripts of the concluded race.
        gain_table: Outcome -> ``(experience, racing)``. Defaults to
            ``STAT_GAIN_TABLE``. Outcomes missing from the table (dead,
            injured) earn nothing and are left out of the result.
    """
    table = STAT_GAIN_TABLE if gain_table is None else gain_table

    gains: List[StatGain] = []
    for script in scripts:
        experience, racing = table.get(script.outcome, (0.0, 0.0))
        if experience <= 0 and racing <= 0:
            continue
        gains.append(
            StatGain(entity_id=script.entity_id, experience=experience, racing=racing)
        )

    logger.debug("Stat gains for %d of %d entities", len(gains), len(scripts))
    return gains
