"""Enumerations and tuning constants for the session engine.

Scoring weights and thresholds are product policy, not physiology; they are
kept here so that tests and callers reference one table.
"""

from enum import IntEnum, auto


class SessionStatus(IntEnum):
    """Lifecycle state of the active workout session."""

    NO_SESSION = auto()
    RUNNING = auto()
    PAUSED = auto()


class Difficulty(IntEnum):
    """Exercise difficulty tier as tagged in the catalog."""

    BEGINNER = auto()
    INTERMEDIATE = auto()
    ADVANCED = auto()


class AppState(IntEnum):
    """Host application lifecycle states delivered to the timer."""

    ACTIVE = auto()
    INACTIVE = auto()
    BACKGROUND = auto()


class OneRepMaxFormula(IntEnum):
    """Estimator used when projecting a 1RM from a submaximal set."""

    EPLEY = auto()
    BRZYCKI = auto()


# ---------------------------------------------------------------------------
# Rest timer policy
# ---------------------------------------------------------------------------
# Heavy strength work (1-5 reps close to failure): 3 min
REST_HEAVY_MAX_REPS = 5
REST_HEAVY_MAX_RIR = 1
REST_HEAVY_SECONDS = 180

# Hypertrophy range (6-12 reps): 90 s
REST_HYPERTROPHY_MAX_REPS = 12
REST_HYPERTROPHY_SECONDS = 90

# Endurance / pump work (13+ reps)
REST_ENDURANCE_SECONDS = 60

# ---------------------------------------------------------------------------
# Exercise suggestion scoring
# ---------------------------------------------------------------------------
BODYWEIGHT_EQUIPMENT = "Bodyweight"

ALREADY_ADDED_SCORE = -1000.0
EXCLUSION_THRESHOLD = -100.0  # Candidates at or below this are dropped

PRIMARY_MATCH_WEIGHT = 3.0
SECONDARY_MATCH_WEIGHT = 1.0
NO_MATCH_PENALTY = 5.0
SIMILAR_PATTERN_PENALTY = 2.0
BEGINNER_BONUS = 0.5

# Recent volume (kg x reps over the last 7 days) per primary muscle
FATIGUE_HIGH_VOLUME = 5000.0
FATIGUE_HIGH_PENALTY = 2.0
FATIGUE_MODERATE_VOLUME = 3000.0
FATIGUE_MODERATE_PENALTY = 1.0

DEFAULT_SUGGESTION_LIMIT = 5

# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------
DEFAULT_EMA_PERIOD = 7

# Brzycki denominator (37 - reps) hits zero at 37 reps; cap at 2x load
BRZYCKI_REP_CAP = 37
BRZYCKI_CAP_MULTIPLIER = 2.0

# ---------------------------------------------------------------------------
# Set input limits
# ---------------------------------------------------------------------------
MAX_SETS_PER_EXERCISE = 20
MAX_REPS_PER_SET = 999
MAX_WEIGHT = 9999.0
MAX_RIR = 10
MAX_WEIGHT_BY_UNITS = {
    "metric": 500.0,  # kg
    "imperial": 1000.0,  # lb
}
