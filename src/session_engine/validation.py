"""Input validation for logged sets.

The state machine accepts whatever it is given; callers that take user
input validate here first.
"""

from __future__ import annotations

from session_engine.exceptions import SetValidationError
from session_engine.models.enums import (
    MAX_REPS_PER_SET,
    MAX_RIR,
    MAX_SETS_PER_EXERCISE,
    MAX_WEIGHT,
    MAX_WEIGHT_BY_UNITS,
)
from session_engine.models.workout import WorkoutExercise


def validate_reps(reps: int) -> bool:
    return 0 < reps <= MAX_REPS_PER_SET


def validate_rir(rir: int) -> bool:
    return 0 <= rir <= MAX_RIR


def validate_weight(weight: float, units: str = "metric") -> bool:
    """Check *weight* against the plausible maximum for *units* (kg or lb)."""
    max_weight = MAX_WEIGHT_BY_UNITS.get(units, MAX_WEIGHT)
    return 0 <= weight <= max_weight


def validate_set_input(
    reps: int,
    weight: float | None = None,
    rir: int | None = None,
    units: str | None = None,
) -> None:
    """Validate raw set fields.

    Without *units*, weight is checked against the absolute maximum.

    Raises:
        SetValidationError: listing every field that is out of range.
    """
    errors: list[str] = []
    if isinstance(reps, bool) or not isinstance(reps, int) or not validate_reps(reps):
        errors.append(f"reps must be an integer between 1 and {MAX_REPS_PER_SET}")
    if weight is not None:
        if units is None:
            if not 0 <= weight <= MAX_WEIGHT:
                errors.append(f"weight must be between 0 and {MAX_WEIGHT:g}")
        elif not validate_weight(weight, units):
            limit = MAX_WEIGHT_BY_UNITS.get(units, MAX_WEIGHT)
            errors.append(f"weight must be between 0 and {limit:g} ({units})")
    if rir is not None:
        if isinstance(rir, bool) or not isinstance(rir, int) or not validate_rir(rir):
            errors.append(f"rir must be an integer between 0 and {MAX_RIR}")
    if errors:
        raise SetValidationError(errors)


def check_set_capacity(exercise: WorkoutExercise) -> None:
    """Raise if *exercise* already holds the maximum number of sets."""
    if len(exercise.sets) >= MAX_SETS_PER_EXERCISE:
        raise SetValidationError(
            [f"{exercise.name} already has {MAX_SETS_PER_EXERCISE} sets"]
        )
