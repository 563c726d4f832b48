"""Shared test fixtures: a controllable clock, sample sets, exercises and catalog."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from session_engine.catalog import ExerciseCatalog
from session_engine.models.enums import Difficulty
from session_engine.models.exercise import ExerciseTemplate
from session_engine.models.workout import WorkoutExercise, WorkoutSet

T0 = datetime(2025, 1, 15, 10, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def set_factory() -> Callable[..., WorkoutSet]:
    """Factory fixture for WorkoutSet.

    Usage:
        s = set_factory(reps=8, weight=80.0, rir=2)
    """

    def factory(
        reps: int = 10,
        weight: float | None = None,
        rir: int | None = None,
        set_number: int = 1,
        offset_s: float = 0.0,
    ) -> WorkoutSet:
        return WorkoutSet(
            set_number=set_number,
            reps=reps,
            weight=weight,
            rir=rir,
            completed_at=T0 + timedelta(seconds=offset_s),
        )

    return factory


@pytest.fixture
def sample_sets(set_factory) -> tuple[WorkoutSet, ...]:
    """100 kg x 10 @ RIR 2 and 50 kg x 5 without RIR: volume 1250."""
    return (
        set_factory(reps=10, weight=100.0, rir=2, set_number=1),
        set_factory(reps=5, weight=50.0, set_number=2, offset_s=120),
    )


@pytest.fixture
def sample_exercises() -> tuple[WorkoutExercise, ...]:
    return (
        WorkoutExercise(exercise_id="ex-bench", name="Bench Press", sort_order=0),
        WorkoutExercise(exercise_id="ex-row", name="Dumbbell Row", sort_order=1),
    )


def make_template(
    template_id: str,
    primary: tuple[str, ...] = (),
    secondary: tuple[str, ...] = (),
    equipment: tuple[str, ...] = ("Dumbbells",),
    difficulty: Difficulty | None = None,
    pattern: str | None = None,
    name: str | None = None,
) -> ExerciseTemplate:
    return ExerciseTemplate(
        template_id=template_id,
        name=name or template_id,
        primary_muscles=primary,
        secondary_muscles=secondary,
        equipment=equipment,
        difficulty=difficulty,
        movement_pattern=pattern,
    )


@pytest.fixture
def sample_catalog() -> ExerciseCatalog:
    """Small mixed catalog covering equipment, pattern and difficulty cases."""
    return ExerciseCatalog(templates=(
        make_template("DB Bench", primary=("Chest",), secondary=("Triceps",), pattern="Push"),
        make_template("Barbell Bench", primary=("Chest",), equipment=("Barbell",), pattern="Push"),
        make_template("Push-Up", primary=("Chest",), equipment=("Bodyweight",),
                      difficulty=Difficulty.BEGINNER, pattern="Push"),
        make_template("DB Fly", primary=("Chest",), secondary=("Shoulders",)),
        make_template("DB Curl", primary=("Biceps",)),
        make_template("DB Row", primary=("Back",), secondary=("Biceps",), pattern="Pull"),
        make_template("Cable Crossover", primary=("Chest",), equipment=("Cable Machine",)),
        make_template("DB Shoulder Press", primary=("Shoulders",), secondary=("Triceps",),
                      pattern="Push"),
    ))


@pytest.fixture
def template_factory() -> Callable[..., ExerciseTemplate]:
    """Factory fixture for ExerciseTemplate; the id doubles as the name."""
    return make_template
