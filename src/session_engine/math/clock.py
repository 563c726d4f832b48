"""Session clock: elapsed-time arithmetic, duration formatting and rest policy.

Elapsed time is always recomputed from absolute timestamps rather than
accumulated tick by tick, so a process that is suspended, killed or resumed
hours later still reports the correct value on its next read.

All functions are pure; callers pass ``now`` explicitly (it defaults to the
current UTC time).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable

from session_engine.models.enums import (
    REST_ENDURANCE_SECONDS,
    REST_HEAVY_MAX_REPS,
    REST_HEAVY_MAX_RIR,
    REST_HEAVY_SECONDS,
    REST_HYPERTROPHY_MAX_REPS,
    REST_HYPERTROPHY_SECONDS,
)
from session_engine.models.workout import PausePeriod

_ONE_MS = timedelta(milliseconds=1)


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(tz=timezone.utc)


def _ms_between(start: datetime, end: datetime) -> int:
    return int((end - start) / _ONE_MS)


def elapsed_ms(
    started_at: datetime,
    paused_at: datetime | None = None,
    now: datetime | None = None,
) -> int:
    """Milliseconds elapsed since *started_at*.

    If *paused_at* is given the clock is frozen at that instant, so repeated
    calls return the same value. Floored at 0 to absorb clock skew (e.g. a
    start timestamp slightly in the future).
    """
    end = paused_at if paused_at is not None else (now or utc_now())
    return max(0, _ms_between(started_at, end))


def elapsed_across_pauses(
    started_at: datetime,
    pause_periods: Iterable[PausePeriod],
    now: datetime | None = None,
) -> int:
    """Milliseconds of active time since *started_at*, excluding completed pauses.

    Args:
        started_at: Session start.
        pause_periods: Completed (paused_at, resumed_at) intervals.
        now: End of the measured window. Pass the current pause instant
            to freeze the reading while paused.

    Returns:
        ``(now - started_at) - sum(resumed_at - paused_at)``, floored at 0.
    """
    end = now or utc_now()
    paused_total = sum(_ms_between(p.paused_at, p.resumed_at) for p in pause_periods)
    return max(0, _ms_between(started_at, end) - paused_total)


def _split_hms(milliseconds: float) -> tuple[int, int, int]:
    total_seconds = max(0, int(milliseconds // 1000))
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return hours, minutes, seconds


def format_duration(milliseconds: float) -> str:
    """Clock display: 'MM:SS' below one hour, else 'H:MM:SS'.

    e.g. 125000 -> '02:05', 3725000 -> '1:02:05'.
    """
    hours, minutes, seconds = _split_hms(milliseconds)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def format_duration_human(milliseconds: float) -> str:
    """Compact display such as '1h 23m' or '4m 10s'.

    Zero-valued units are omitted and seconds are dropped once hours are
    present. Returns '0s' for anything under one second.
    """
    hours, minutes, seconds = _split_hms(milliseconds)
    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if seconds > 0 and hours == 0:
        parts.append(f"{seconds}s")
    return " ".join(parts) or "0s"


def recommended_rest_seconds(reps: int, rir: int | None) -> int:
    """Rest before the next set, from the set's reps and reps in reserve.

    Heavy work (<= 5 reps, RIR unknown or <= 1) gets 3 minutes, the
    hypertrophy range (<= 12 reps) 90 seconds, anything higher 60 seconds.
    """
    if reps <= REST_HEAVY_MAX_REPS and (rir is None or rir <= REST_HEAVY_MAX_RIR):
        return REST_HEAVY_SECONDS
    if reps <= REST_HYPERTROPHY_MAX_REPS:
        return REST_HYPERTROPHY_SECONDS
    return REST_ENDURANCE_SECONDS


def rest_elapsed_ms(last_set_completed_at: datetime, now: datetime | None = None) -> int:
    """Milliseconds rested since the last completed set, floored at 0."""
    return elapsed_ms(last_set_completed_at, now=now)


def has_reached_rest_target(
    last_set_completed_at: datetime,
    target_rest_seconds: float,
    now: datetime | None = None,
) -> bool:
    """True once the rest since the last set meets *target_rest_seconds*."""
    return rest_elapsed_ms(last_set_completed_at, now) >= target_rest_seconds * 1000
