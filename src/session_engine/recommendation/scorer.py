"""Exercise suggestion scorer.

Candidates are catalog templates the user has equipment for. Each is scored
on muscle relevance to the day, movement-pattern diversity against what is
already chosen, fatigue of its primary muscles, and a small beginner bonus.
Already-chosen exercises get a sentinel score and are always dropped.

Pure and order-stable: identical inputs give identical output, and equal
scores keep catalog order.
"""

from __future__ import annotations

from typing import Iterable

from session_engine.models.enums import (
    ALREADY_ADDED_SCORE,
    BEGINNER_BONUS,
    DEFAULT_SUGGESTION_LIMIT,
    EXCLUSION_THRESHOLD,
    FATIGUE_HIGH_PENALTY,
    FATIGUE_HIGH_VOLUME,
    FATIGUE_MODERATE_PENALTY,
    FATIGUE_MODERATE_VOLUME,
    NO_MATCH_PENALTY,
    PRIMARY_MATCH_WEIGHT,
    SECONDARY_MATCH_WEIGHT,
    SIMILAR_PATTERN_PENALTY,
    Difficulty,
)
from session_engine.models.exercise import ExerciseTemplate
from session_engine.models.recommendation import RecommendationContext, ScoredExercise


def fatigue_penalty(template: ExerciseTemplate, context: RecommendationContext) -> float:
    """Sum of per-primary-muscle penalties from recent training volume."""
    penalty = 0.0
    for muscle in template.primary_muscles:
        volume = context.volume_for(muscle)
        if volume > FATIGUE_HIGH_VOLUME:
            penalty += FATIGUE_HIGH_PENALTY
        elif volume > FATIGUE_MODERATE_VOLUME:
            penalty += FATIGUE_MODERATE_PENALTY
    return penalty


def score_exercise(
    template: ExerciseTemplate,
    context: RecommendationContext,
    chosen_patterns: frozenset[str] = frozenset(),
) -> ScoredExercise:
    """Score one equipment-eligible template.

    Args:
        template: Candidate exercise.
        context: The day being planned.
        chosen_patterns: Movement patterns of the already-chosen exercises.

    Returns:
        The candidate with its score and a comma-joined reason.
    """
    if template.name in context.existing_exercises:
        return ScoredExercise(template=template, score=ALREADY_ADDED_SCORE, reason="Already added")

    score = 0.0
    reasons: list[str] = []

    primary = [m for m in template.primary_muscles if m in context.day_tags]
    secondary = [m for m in template.secondary_muscles if m in context.day_tags]
    score += len(primary) * PRIMARY_MATCH_WEIGHT
    score += len(secondary) * SECONDARY_MATCH_WEIGHT
    if primary:
        reasons.append(f"Targets {', '.join(primary)}")
    if not primary and not secondary:
        score -= NO_MATCH_PENALTY
        reasons.append("Low relevance")

    if template.movement_pattern and template.movement_pattern in chosen_patterns:
        score -= SIMILAR_PATTERN_PENALTY
        reasons.append("Similar movement pattern")

    fatigue = fatigue_penalty(template, context)
    score -= fatigue
    if fatigue > 0:
        reasons.append("Muscle group fatigued")

    if template.difficulty == Difficulty.BEGINNER:
        score += BEGINNER_BONUS

    return ScoredExercise(template=template, score=score, reason=", ".join(reasons) or "Good match")


def score_exercises(
    context: RecommendationContext,
    catalog: Iterable[ExerciseTemplate],
) -> tuple[ScoredExercise, ...]:
    """Score every equipment-eligible template, in catalog order."""
    available = [t for t in catalog if t.usable_with(context.equipment)]
    chosen_patterns = frozenset(
        t.movement_pattern
        for t in available
        if t.name in context.existing_exercises and t.movement_pattern
    )
    return tuple(score_exercise(t, context, chosen_patterns) for t in available)


def rank_exercises(
    context: RecommendationContext,
    catalog: Iterable[ExerciseTemplate],
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> tuple[ScoredExercise, ...]:
    """Top *limit* scored candidates, best first; ties keep catalog order."""
    eligible = [s for s in score_exercises(context, catalog) if s.score > EXCLUSION_THRESHOLD]
    # sorted() is stable, also with reverse=True
    ranked = sorted(eligible, key=lambda s: s.score, reverse=True)
    return tuple(ranked[:limit])


def suggest_exercises(
    context: RecommendationContext,
    catalog: Iterable[ExerciseTemplate],
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> tuple[ExerciseTemplate, ...]:
    """Recommend up to *limit* exercises for the day.

    Never returns an exercise whose name is in ``context.existing_exercises``.
    """
    return tuple(s.template for s in rank_exercises(context, catalog, limit))
