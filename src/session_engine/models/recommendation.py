"""Exercise suggestion input context and scored output."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from session_engine.models.exercise import ExerciseTemplate


@dataclass(frozen=True)
class RecommendationContext:
    """What the user is assembling a day around.

    ``recent_volume`` maps muscle group to recent training volume; missing
    groups count as zero.
    """

    day_tags: tuple[str, ...] = field(default_factory=tuple)
    equipment: tuple[str, ...] = field(default_factory=tuple)
    existing_exercises: tuple[str, ...] = field(default_factory=tuple)
    recent_volume: Mapping[str, float] = field(default_factory=dict)

    def volume_for(self, muscle_group: str) -> float:
        return float(self.recent_volume.get(muscle_group, 0.0) or 0.0)


@dataclass(frozen=True)
class ScoredExercise:
    """A catalog candidate with its score and a human-readable reason."""

    template: ExerciseTemplate
    score: float
    reason: str = ""
