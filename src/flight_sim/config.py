# Geography
EARTH_RADIUS_M = 6_371_000.0

# Loiter phase: birds circle the start point before departing
LOITER_DURATION = 30.0  # seconds
LOITER_RADIUS = 0.01  # degrees
LOITER_ANGULAR_SPEED = 0.5  # radians per second
LOITER_WOBBLE_FREQUENCY = 0.8
LOITER_WOBBLE_AMPLITUDE = 0.002  # degrees

# Transit wobble (degrees); scaled by the discipline factor below
GROUP_OFFSET_STEP = 0.001
GROUP_WOBBLE_FREQUENCY = 0.2
GROUP_WOBBLE_AMPLITUDE = 0.002
INDIVIDUAL_WOBBLE_FREQUENCY = 0.3
INDIVIDUAL_WOBBLE_AMPLITUDE = 0.001
INDIVIDUAL_OFFSET_STEP = 0.00005

# Discipline = mean(focus, navigation, sky_iq) on a 0-100 scale.
# Wobble multiplier runs from MAX (discipline 0) down to MIN (discipline 100).
STAT_SCALE = 100.0
WOBBLE_MULTIPLIER_MAX = 1.5
WOBBLE_MULTIPLIER_MIN = 0.5

# Group banding by hidden leadership stat
DEFAULT_LEADERSHIP = 50.0
GROUP_BANDS = [
    (70.0, "leaders"),
    (50.0, "main"),
]
FALLBACK_BAND = "followers"

LOITER_GROUP_ID = "loitering"
DEGENERATE_GROUP_ID = "start"

# Tie-break priority for events sharing a timestamp (lower runs first)
EVENT_PRIORITY = {
    "strayed_end": 1,
    "returned": 2,
    "lost": 3,
    "accident": 3,
    "death": 3,
    "strayed": 4,
    "overshot": 5,
}
UNRANKED_EVENT_PRIORITY = 99  # miracle_finish, joined_group, left_group

# Post-race gains by outcome: (experience, racing).
# Outcomes missing from the table earn nothing and are left out of results.
FINISH_GAIN = 0.12
PARTICIPATION_GAIN = 0.04
STAT_GAIN_TABLE = {
    "finished": (FINISH_GAIN, FINISH_GAIN),
    "dnf": (PARTICIPATION_GAIN, PARTICIPATION_GAIN),
    "lost": (PARTICIPATION_GAIN, PARTICIPATION_GAIN),
    "returned": (PARTICIPATION_GAIN, PARTICIPATION_GAIN),
}
