"""Performance analytics over logged sets: volume, reps, RIR, 1RM and smoothing.

References:
    - Epley (1985): 1RM = w * (1 + reps / 30)
    - Brzycki (1993): 1RM = w * 36 / (37 - reps)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

from session_engine.models.enums import (
    BRZYCKI_CAP_MULTIPLIER,
    BRZYCKI_REP_CAP,
    DEFAULT_EMA_PERIOD,
    OneRepMaxFormula,
)
from session_engine.models.workout import WorkoutSet


@dataclass(frozen=True)
class WorkoutStats:
    """Aggregate numbers shown on a session summary."""

    total_sets: int
    total_reps: int
    total_volume: float
    total_duration_ms: int
    strength_score: float


def total_volume(sets: Sequence[WorkoutSet]) -> float:
    """Sum of weight x reps; unweighted sets contribute 0."""
    return float(sum((s.weight or 0.0) * s.reps for s in sets))


def total_reps(sets: Sequence[WorkoutSet]) -> int:
    return sum(s.reps for s in sets)


def strength_score(sets: Sequence[WorkoutSet]) -> float:
    """Volume-based strength score.

    Numerically identical to total_volume, but tracked as its own series
    so the score's definition can evolve independently of raw volume.
    """
    return float(sum((s.weight or 0.0) * s.reps for s in sets))


def average_reserve(sets: Sequence[WorkoutSet]) -> float:
    """Mean RIR over sets that recorded one; 0.0 when none did."""
    rirs = [s.rir for s in sets if s.rir is not None]
    if not rirs:
        return 0.0
    return float(np.mean(np.array(rirs, dtype=np.float64)))


def one_rep_max_epley(weight: float, reps: int) -> float:
    """Epley 1RM estimate. A single rep is its own 1RM."""
    if reps == 1:
        return weight
    return weight * (1 + reps / 30)


def one_rep_max_brzycki(weight: float, reps: int) -> float:
    """Brzycki 1RM estimate, capped at 2x load from 37 reps upward."""
    if reps == 1:
        return weight
    if reps >= BRZYCKI_REP_CAP:
        return weight * BRZYCKI_CAP_MULTIPLIER
    return weight * 36 / (BRZYCKI_REP_CAP - reps)


_ONE_REP_MAX = {
    OneRepMaxFormula.EPLEY: one_rep_max_epley,
    OneRepMaxFormula.BRZYCKI: one_rep_max_brzycki,
}


def best_one_rep_max(
    sets: Sequence[WorkoutSet],
    formula: OneRepMaxFormula = OneRepMaxFormula.EPLEY,
) -> float:
    """Highest estimated 1RM across weighted sets, or 0.0 if none are weighted."""
    estimator = _ONE_REP_MAX[formula]
    estimates = [estimator(s.weight, s.reps) for s in sets if s.weight is not None]
    return max(estimates, default=0.0)


def ema(values: Sequence[float], period: int = DEFAULT_EMA_PERIOD) -> list[float]:
    """Exponential moving average of a series, one output per input.

    alpha = 2 / (period + 1); the first output equals the first input and
    each later one is ``alpha * x[i] + (1 - alpha) * ema[i - 1]``. This is
    pandas' ``ewm(span=period, adjust=False)``.

    Args:
        values: Series to smooth (oldest first).
        period: Smoothing span.

    Returns:
        The smoothed series; empty for empty input.

    Raises:
        ValueError: If period is less than 1.
    """
    if period < 1:
        raise ValueError(f"EMA period must be at least 1, got {period}")
    if len(values) == 0:
        return []
    series = pd.Series(list(values), dtype=np.float64)
    smoothed = series.ewm(span=period, adjust=False).mean()
    return [float(v) for v in smoothed]


def workout_stats(sets: Sequence[WorkoutSet], duration_ms: int) -> WorkoutStats:
    """Summarise a session's logged sets."""
    return WorkoutStats(
        total_sets=len(sets),
        total_reps=total_reps(sets),
        total_volume=total_volume(sets),
        total_duration_ms=duration_ms,
        strength_score=strength_score(sets),
    )
