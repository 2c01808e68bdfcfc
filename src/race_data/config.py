from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
RACES_DIR = DATA_DIR / "races"
REPORTS_DIR = DATA_DIR / "reports"

# Replay sampling
DEFAULT_REPLAY_STEP = 60.0  # seconds between sampled frames

# Stat keys accepted in race files, mapped to EntityStats fields.
# camelCase aliases match exports from the game's web client.
STAT_KEY_ALIASES = {
    "speed": "speed",
    "focus": "focus",
    "navigation": "navigation",
    "sky_iq": "sky_iq",
    "skyIQ": "sky_iq",
    "endurance": "endurance",
    "wind_resistance": "wind_resistance",
    "windResistance": "wind_resistance",
    "experience": "experience",
    "aggression": "aggression",
    "leadership": "leadership",
    "race_start": "race_start",
    "raceStart": "race_start",
}
