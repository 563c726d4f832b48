"""Deterministic exercise suggestions for assembling a workout day."""

from session_engine.recommendation.scorer import (
    rank_exercises,
    score_exercise,
    score_exercises,
    suggest_exercises,
)

__all__ = ["rank_exercises", "score_exercise", "score_exercises", "suggest_exercises"]
