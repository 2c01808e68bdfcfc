"""Event timeline normalization.

Turns a script's unordered events into a time-sorted timeline the progress
integrator can sweep left to right. Each ``Strayed`` window gets a synthetic
``StrayedEnd`` marker so the pause can be lifted at the right instant.

Events that share a timestamp are ordered by ``EVENT_PRIORITY``:

    StrayedEnd -> Returned -> Lost/Accident/Death -> Strayed -> Overshot

Pauses are lifted before new pauses or terminal conditions are evaluated at
the same instant, and ``Overshot`` never interferes with the pause/terminal
bookkeeping of simultaneous events. Events without a priority (group changes,
miracle finishes) run last. Equal priorities keep script order.
"""

import logging
import math
from dataclasses import dataclass
from typing import ClassVar, List, Tuple, Union

from src.flight_sim.config import EVENT_PRIORITY, UNRANKED_EVENT_PRIORITY
from src.flight_sim.models import (
    Accident,
    Death,
    JoinedGroup,
    LeftGroup,
    Lost,
    MiracleFinish,
    Overshot,
    RaceEvent,
    RaceScript,
    Returned,
    Strayed,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StrayedEnd:
    """Internal marker closing a ``Strayed`` window. Never part of a script."""

    kind: ClassVar[str] = "strayed_end"

    t: float


TimelineEvent = Union[RaceEvent, StrayedEnd]


@dataclass(frozen=True)
class TimelineEntry:
    t: float
    event: TimelineEvent


def event_priority(event: TimelineEvent) -> int:
    """Tie-break rank of *event* among events sharing its timestamp."""
    if isinstance(event, (StrayedEnd, Returned, Lost, Accident, Death, Strayed, Overshot)):
        return EVENT_PRIORITY[event.kind]
    if isinstance(event, (MiracleFinish, JoinedGroup, LeftGroup)):
        return UNRANKED_EVENT_PRIORITY
    raise TypeError(f"Unhandled race event type: {type(event).__name__}")


def normalize_timeline(script: RaceScript) -> Tuple[TimelineEntry, ...]:
    """Sort a script's events and add the synthetic stray-end markers.

    Events with a non-finite timestamp and strays with no positive duration
    carry no information for the sweep and are dropped.
    """
    entries: List[TimelineEntry] = []
    for event in script.events:
        event_priority(event)  # rejects unknown event types up front

        if not math.isfinite(event.t):
            logger.warning(
                "Dropping %s event with invalid time %r for entity %s",
                event.kind, event.t, script.entity_id,
            )
            continue

        if isinstance(event, Strayed):
            if not math.isfinite(event.duration) or event.duration <= 0:
                logger.debug(
                    "Ignoring zero-length stray at t=%s for entity %s",
                    event.t, script.entity_id,
                )
                continue
            entries.append(TimelineEntry(event.t, event))
            entries.append(TimelineEntry(event.t + event.duration, StrayedEnd(event.t + event.duration)))
            continue

        entries.append(TimelineEntry(event.t, event))

    # sorted() is stable, so equal (t, priority) pairs keep script order
    return tuple(sorted(entries, key=lambda e: (e.t, event_priority(e.event))))
