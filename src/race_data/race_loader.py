"""Race fixture persistence - save and load races to/from JSON files.

A race file holds the race configuration, per-entity stats and every
entity's event script::

    {
      "race_id": "spring-open",
      "config": {"start": {"lat": .., "lng": ..}, "home_bases": [..],
                 "total_distance": 1000, "weather_zone": {..}},
      "stats": {"p1": {"speed": 35, "focus": 80, ...}},
      "scripts": [{"entity_id": "p1", "outcome": "finished",
                   "finish_time": 950, "home_base_index": 0,
                   "events": [{"type": "strayed", "t": 100, "duration": 50}]}]
    }
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from src.flight_sim.models import (
    EVENT_TYPES,
    VALID_OUTCOMES,
    EntityStats,
    JoinedGroup,
    LatLng,
    Overshot,
    RaceConfig,
    RaceEvent,
    RaceFixture,
    RaceScript,
    Strayed,
    WeatherZone,
)
from src.race_data.config import RACES_DIR, STAT_KEY_ALIASES

logger = logging.getLogger(__name__)

_EVENT_CLASSES = {cls.kind: cls for cls in EVENT_TYPES}


class RaceDataError(Exception):
    """Raised when a race file is missing fields or holds invalid values."""


# ----------------------------------------------------------------------
# Codec
# ----------------------------------------------------------------------


def _to_float(value, label: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise RaceDataError(f"{label} is not a number ({value!r})")


def _number(data: Dict, key: str, context: str) -> float:
    if key not in data:
        raise RaceDataError(f"{context}: missing '{key}'")
    return _to_float(data[key], f"{context}: '{key}'")


def event_from_dict(data: Dict) -> RaceEvent:
    """Build a race event from its JSON form (``{"type": ..., "t": ...}``)."""
    if not isinstance(data, dict):
        raise RaceDataError(f"event: expected an object, got {type(data).__name__}")
    kind = data.get("type")
    cls = _EVENT_CLASSES.get(kind)
    if cls is None:
        raise RaceDataError(f"Unknown event type: {kind!r}")

    context = f"{kind} event"
    t = _number(data, "t", context)

    if cls is Strayed:
        return Strayed(t=t, duration=_number(data, "duration", context))
    if cls is Overshot:
        return Overshot(t=t, distance=_number(data, "distance", context))
    if cls is JoinedGroup:
        group_id = data.get("group_id", data.get("groupId"))
        if not group_id:
            raise RaceDataError(f"{context}: missing 'group_id'")
        return JoinedGroup(t=t, group_id=str(group_id))
    return cls(t=t)


def event_to_dict(event: RaceEvent) -> Dict:
    """JSON form of a race event."""
    data = {"type": event.kind, "t": event.t}
    if isinstance(event, Strayed):
        data["duration"] = event.duration
    elif isinstance(event, Overshot):
        data["distance"] = event.distance
    elif isinstance(event, JoinedGroup):
        data["group_id"] = event.group_id
    return data


def _latlng_from_dict(data, context: str) -> LatLng:
    if not isinstance(data, dict):
        raise RaceDataError(f"{context}: expected an object with 'lat' and 'lng'")
    return LatLng(lat=_number(data, "lat", context), lng=_number(data, "lng", context))


def _stats_from_dict(entity_id: str, data: Dict) -> EntityStats:
    values = {}
    for key, value in data.items():
        field_name = STAT_KEY_ALIASES.get(key)
        if field_name is None:
            logger.debug("Ignoring unknown stat %r for entity %s", key, entity_id)
            continue
        values[field_name] = _number(data, key, f"stats for {entity_id}")
    if "speed" not in values:
        raise RaceDataError(f"stats for {entity_id}: missing 'speed'")
    return EntityStats(**values)


def _script_from_dict(data: Dict) -> RaceScript:
    if not isinstance(data, dict):
        raise RaceDataError(f"script: expected an object, got {type(data).__name__}")
    entity_id = data.get("entity_id", data.get("pigeonId"))
    if entity_id is None:
        raise RaceDataError("script: missing 'entity_id'")
    entity_id = str(entity_id)

    outcome = data.get("outcome")
    if outcome not in VALID_OUTCOMES:
        raise RaceDataError(f"script {entity_id}: invalid outcome {outcome!r}")

    finish_time = data.get("finish_time", data.get("finishTime"))
    if finish_time is not None:
        finish_time = _to_float(finish_time, f"script {entity_id}: 'finish_time'")
    if outcome == "finished" and finish_time is None:
        logger.warning("Script %s finished without a finish time", entity_id)

    home_base_index = data.get("home_base_index", data.get("homeBaseIndex", 0))

    return RaceScript(
        entity_id=entity_id,
        events=tuple(event_from_dict(e) for e in data.get("events", [])),
        outcome=outcome,
        finish_time=finish_time,
        home_base_index=int(_to_float(home_base_index, f"script {entity_id}: 'home_base_index'")),
    )


def dict_to_fixture(data: Dict) -> RaceFixture:
    """Reconstruct a :class:`RaceFixture` from its JSON form."""
    try:
        cfg = data["config"]
        raw_scripts = data["scripts"]
    except (KeyError, TypeError) as e:
        raise RaceDataError(f"Race file missing section: {e}")
    if not isinstance(cfg, dict) or not isinstance(raw_scripts, list):
        raise RaceDataError("Race file 'config' must be an object and 'scripts' a list")

    zone = None
    if cfg.get("weather_zone"):
        wz = cfg["weather_zone"]
        zone = WeatherZone(
            type=str(wz.get("type", "")),
            severity=_to_float(wz.get("severity", 0.0), "weather_zone: 'severity'"),
            area=tuple(_latlng_from_dict(p, "weather_zone") for p in wz.get("area", [])),
        )

    config = RaceConfig(
        start=_latlng_from_dict(cfg.get("start"), "config.start"),
        home_bases=tuple(
            _latlng_from_dict(p, "config.home_bases") for p in cfg.get("home_bases", [])
        ),
        total_distance=_number(cfg, "total_distance", "config"),
        weather_zone=zone,
    )

    stats = {
        str(entity_id): _stats_from_dict(str(entity_id), values)
        for entity_id, values in data.get("stats", {}).items()
    }

    return RaceFixture(
        race_id=str(data.get("race_id", "unnamed")),
        config=config,
        scripts=tuple(_script_from_dict(s) for s in raw_scripts),
        stats=stats,
    )


def fixture_to_dict(fixture: RaceFixture) -> Dict:
    """Convert a :class:`RaceFixture` to a JSON-serializable dict."""
    cfg = fixture.config
    zone = cfg.weather_zone
    return {
        "race_id": fixture.race_id,
        "config": {
            "start": {"lat": cfg.start.lat, "lng": cfg.start.lng},
            "home_bases": [{"lat": p.lat, "lng": p.lng} for p in cfg.home_bases],
            "total_distance": cfg.total_distance,
            "weather_zone": (
                {
                    "type": zone.type,
                    "severity": zone.severity,
                    "area": [{"lat": p.lat, "lng": p.lng} for p in zone.area],
                }
                if zone is not None
                else None
            ),
        },
        "stats": {
            entity_id: {
                key: value
                for key, value in vars(s).items()
                if value is not None
            }
            for entity_id, s in fixture.stats.items()
        },
        "scripts": [
            {
                "entity_id": script.entity_id,
                "outcome": script.outcome,
                "finish_time": script.finish_time,
                "home_base_index": script.home_base_index,
                "events": [event_to_dict(e) for e in script.events],
            }
            for script in fixture.scripts
        ],
    }


# ----------------------------------------------------------------------
# Storage
# ----------------------------------------------------------------------


class RaceFileStore:
    """Handles saving and loading race fixtures as JSON files."""

    def __init__(self, storage_dir: Optional[Path] = None):
        self.storage_dir = storage_dir or RACES_DIR
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def save_race(self, fixture: RaceFixture) -> Path:
        """Save a race fixture to ``race_{race_id}.json``.

        Returns:
            Path to the saved file.
        """
        filepath = self.storage_dir / f"race_{fixture.race_id}.json"

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(fixture_to_dict(fixture), f, indent=2)

        logger.info(
            "Saved race %s (%d entities) to %s",
            fixture.race_id, len(fixture.scripts), filepath,
        )
        return filepath

    def load_race(self, race_id: str) -> Optional[RaceFixture]:
        """Load a stored race by id.

        Returns:
            RaceFixture if found, None otherwise.

        Raises:
            RaceDataError: If the file exists but is malformed.
        """
        filepath = self.storage_dir / f"race_{race_id}.json"
        if not filepath.exists():
            logger.warning("Race file not found: %s", filepath)
            return None
        return self.load_file(filepath)

    @staticmethod
    def load_file(filepath: Path) -> RaceFixture:
        """Load a race fixture from an arbitrary path.

        Raises:
            FileNotFoundError: If *filepath* does not exist.
            RaceDataError: If the file is not valid JSON or not a race.
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"Race file not found: {filepath}")

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise RaceDataError(f"Corrupt race file {filepath}: {e}")

        if not isinstance(data, dict):
            raise RaceDataError(f"Race file {filepath} does not hold an object")

        fixture = dict_to_fixture(data)
        logger.info(
            "Loaded race %s (%d entities) from %s",
            fixture.race_id, len(fixture.scripts), filepath,
        )
        return fixture

    def list_races(self) -> List[Dict]:
        """List stored races with metadata, sorted by race id.

        Unreadable files are skipped with a warning.
        """
        races = []

        for filepath in self.storage_dir.glob("race_*.json"):
            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    data = json.load(f)

                races.append(
                    {
                        "race_id": data["race_id"],
                        "entities": len(data.get("scripts", [])),
                        "total_distance": data.get("config", {}).get("total_distance"),
                        "path": filepath,
                    }
                )
            except (json.JSONDecodeError, OSError, KeyError, TypeError) as e:
                logger.warning("Skipping corrupt race file %s: %s", filepath, e)
                continue

        return sorted(races, key=lambda x: str(x["race_id"]))

    def delete_race(self, race_id: str) -> bool:
        """Delete a stored race. Returns False if it did not exist."""
        filepath = self.storage_dir / f"race_{race_id}.json"
        if not filepath.exists():
            return False
        filepath.unlink()
        logger.info("Deleted race %s", race_id)
        return True
