"""Exercise templates: the static catalog entries suggestions are drawn from."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from session_engine.models.enums import BODYWEIGHT_EQUIPMENT, Difficulty


@dataclass(frozen=True)
class ExerciseTemplate:
    """A single catalog exercise.

    Muscle and equipment tags keep their catalog order so that reasons
    built from them read the same way every time.
    """

    template_id: str
    name: str
    primary_muscles: tuple[str, ...] = field(default_factory=tuple)
    secondary_muscles: tuple[str, ...] = field(default_factory=tuple)
    equipment: tuple[str, ...] = field(default_factory=tuple)
    default_rep_min: int | None = None
    default_rep_max: int | None = None
    difficulty: Difficulty | None = None
    movement_pattern: str | None = None

    def targets(self, muscle_group: str) -> bool:
        """True if *muscle_group* is a primary or secondary muscle."""
        return muscle_group in self.primary_muscles or muscle_group in self.secondary_muscles

    def usable_with(self, equipment: Iterable[str]) -> bool:
        """True if any required item is available; Bodyweight always is."""
        available = set(equipment)
        return any(eq in available or eq == BODYWEIGHT_EQUIPMENT for eq in self.equipment)
