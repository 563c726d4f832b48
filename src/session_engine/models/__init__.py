"""Data models for the session engine."""

from session_engine.models.enums import (
    AppState,
    Difficulty,
    OneRepMaxFormula,
    SessionStatus,
)
from session_engine.models.exercise import ExerciseTemplate
from session_engine.models.recommendation import RecommendationContext, ScoredExercise
from session_engine.models.workout import (
    ActiveSession,
    PausePeriod,
    WorkoutExercise,
    WorkoutSet,
)

__all__ = [
    "ActiveSession",
    "AppState",
    "Difficulty",
    "ExerciseTemplate",
    "OneRepMaxFormula",
    "PausePeriod",
    "RecommendationContext",
    "ScoredExercise",
    "SessionStatus",
    "WorkoutExercise",
    "WorkoutSet",
]
