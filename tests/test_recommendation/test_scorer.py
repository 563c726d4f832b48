"""Tests for the exercise suggestion scorer."""

from __future__ import annotations

import pytest

from session_engine.models.enums import ALREADY_ADDED_SCORE, Difficulty
from session_engine.models.recommendation import RecommendationContext
from session_engine.recommendation.scorer import (
    fatigue_penalty,
    rank_exercises,
    score_exercises,
    suggest_exercises,
)


def _names(templates) -> list[str]:
    return [t.name for t in templates]


@pytest.fixture
def chest_day() -> RecommendationContext:
    return RecommendationContext(day_tags=("Chest",), equipment=("Dumbbells",))


class TestEquipmentFilter:
    def test_unavailable_equipment_excluded(self, chest_day, sample_catalog) -> None:
        names = [s.template.name for s in score_exercises(chest_day, sample_catalog)]
        assert "Barbell Bench" not in names
        assert "Cable Crossover" not in names

    def test_bodyweight_always_available(self, sample_catalog) -> None:
        context = RecommendationContext(day_tags=("Chest",), equipment=())
        assert _names(suggest_exercises(context, sample_catalog)) == ["Push-Up"]

    def test_fewer_than_limit(self, sample_catalog) -> None:
        context = RecommendationContext(day_tags=("Chest",), equipment=("Cable Machine",))
        assert _names(suggest_exercises(context, sample_catalog)) == ["Push-Up", "Cable Crossover"]


class TestScoring:
    def test_chest_day_ranking(self, chest_day, sample_catalog) -> None:
        ranked = rank_exercises(chest_day, sample_catalog)
        assert [(s.template.name, s.score) for s in ranked] == [
            ("Push-Up", 3.5),
            ("DB Bench", 3.0),
            ("DB Fly", 3.0),
            ("DB Curl", -5.0),
            ("DB Row", -5.0),
        ]

    def test_primary_match_outranks_no_match(self, template_factory) -> None:
        catalog = (
            template_factory("Curl", primary=("Biceps",)),
            template_factory("Press", primary=("Chest",)),
        )
        context = RecommendationContext(day_tags=("Chest",), equipment=("Dumbbells",))
        assert _names(suggest_exercises(context, catalog)) == ["Press", "Curl"]

    def test_secondary_match(self, template_factory) -> None:
        template = template_factory("Close Grip", primary=("Chest",), secondary=("Triceps",))
        context = RecommendationContext(day_tags=("Triceps",), equipment=("Dumbbells",))
        scored = score_exercises(context, [template])[0]
        assert scored.score == 1.0
        assert scored.reason == "Good match"

    def test_beginner_bonus(self, template_factory) -> None:
        template = template_factory("Easy", primary=("Chest",), difficulty=Difficulty.BEGINNER)
        context = RecommendationContext(day_tags=("Chest",), equipment=("Dumbbells",))
        assert score_exercises(context, [template])[0].score == 3.5

    def test_reasons(self, chest_day, sample_catalog) -> None:
        reasons = {s.template.name: s.reason for s in score_exercises(chest_day, sample_catalog)}
        assert reasons["DB Bench"] == "Targets Chest"
        assert reasons["DB Curl"] == "Low relevance"


class TestAlreadyAdded:
    def test_never_returned(self, sample_catalog) -> None:
        context = RecommendationContext(
            day_tags=("Chest",), equipment=("Dumbbells",), existing_exercises=("DB Bench",)
        )
        scored = {s.template.name: s for s in score_exercises(context, sample_catalog)}
        assert scored["DB Bench"].score == ALREADY_ADDED_SCORE
        assert scored["DB Bench"].reason == "Already added"
        assert "DB Bench" not in _names(suggest_exercises(context, sample_catalog))

    def test_pattern_penalty_from_chosen(self, sample_catalog) -> None:
        context = RecommendationContext(
            day_tags=("Chest",), equipment=("Dumbbells",), existing_exercises=("DB Bench",)
        )
        ranked = rank_exercises(context, sample_catalog)
        assert [(s.template.name, s.score) for s in ranked] == [
            ("DB Fly", 3.0),
            ("Push-Up", 1.5),
            ("DB Curl", -5.0),
            ("DB Row", -5.0),
            ("DB Shoulder Press", -7.0),
        ]
        push_up = next(s for s in ranked if s.template.name == "Push-Up")
        assert "Similar movement pattern" in push_up.reason

    def test_pattern_only_from_equipment_eligible_choices(self, chest_day, sample_catalog) -> None:
        context = RecommendationContext(
            day_tags=("Chest",), equipment=("Dumbbells",), existing_exercises=("Barbell Bench",)
        )
        scored = {s.template.name: s.score for s in score_exercises(context, sample_catalog)}
        assert scored["Push-Up"] == 3.5


class TestFatigue:
    @pytest.mark.parametrize(
        "volume,penalty",
        [(0.0, 0.0), (3000.0, 0.0), (3000.5, 1.0), (5000.0, 1.0), (5001.0, 2.0)],
    )
    def test_thresholds(self, template_factory, volume: float, penalty: float) -> None:
        template = template_factory("Press", primary=("Chest",))
        context = RecommendationContext(recent_volume={"Chest": volume})
        assert fatigue_penalty(template, context) == penalty

    def test_sums_over_primary_muscles(self, template_factory) -> None:
        template = template_factory("Squat", primary=("Quads", "Glutes"))
        context = RecommendationContext(recent_volume={"Quads": 6000.0, "Glutes": 4000.0})
        assert fatigue_penalty(template, context) == 3.0

    def test_fatigued_muscles_drop_in_rank(self, sample_catalog) -> None:
        context = RecommendationContext(
            day_tags=("Chest", "Back"),
            equipment=("Dumbbells",),
            recent_volume={"Chest": 6000.0},
        )
        ranked = rank_exercises(context, sample_catalog)
        assert ranked[0].template.name == "DB Row"
        assert "Muscle group fatigued" in ranked[1].reason


class TestDeterminism:
    def test_identical_inputs_identical_output(self, chest_day, sample_catalog) -> None:
        assert rank_exercises(chest_day, sample_catalog) == rank_exercises(chest_day, sample_catalog)

    def test_ties_keep_catalog_order(self, template_factory) -> None:
        catalog = tuple(template_factory(f"Press {i}", primary=("Chest",)) for i in range(7))
        context = RecommendationContext(day_tags=("Chest",), equipment=("Dumbbells",))
        assert _names(suggest_exercises(context, catalog)) == [f"Press {i}" for i in range(5)]

    def test_custom_limit(self, chest_day, sample_catalog) -> None:
        assert len(suggest_exercises(chest_day, sample_catalog, limit=2)) == 2
