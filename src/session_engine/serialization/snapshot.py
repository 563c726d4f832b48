"""JSON codec for the persisted ActiveSession snapshot.

Wire shape (camelCase, ISO-8601 UTC timestamps)::

    {
      "sessionId": "...",
      "startedAt": "2025-01-15T10:00:00.000Z",
      "currentExerciseId": "..." | null,
      "exercises": [{"id", "sessionId", "name", "sortOrder", "sets": [
        {"id", "workoutExerciseId", "setNumber", "reps", "weight", "rir", "completedAt"}
      ]}],
      "isPaused": false,
      "pausedAt": null,
      "pausePeriods": [{"pausedAt", "resumedAt"}]
    }

``pausePeriods`` is optional on read so older snapshots still load. The
exercise ``sessionId`` and set ``workoutExerciseId`` are written from the
parent objects; on read they are implied by nesting.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from session_engine.exceptions import SnapshotDecodeError
from session_engine.models.workout import (
    ActiveSession,
    PausePeriod,
    WorkoutExercise,
    WorkoutSet,
)


def _format_ts(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    iso = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return iso.replace("+00:00", "Z")


def _parse_ts(raw: Any, field_name: str) -> datetime:
    if not isinstance(raw, str):
        raise SnapshotDecodeError(f"{field_name}: expected ISO-8601 string, got {raw!r}")
    text = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise SnapshotDecodeError(f"{field_name}: invalid timestamp {raw!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def _set_to_dict(workout_set: WorkoutSet, exercise_id: str) -> dict:
    return {
        "id": workout_set.set_id,
        "workoutExerciseId": exercise_id,
        "setNumber": workout_set.set_number,
        "reps": workout_set.reps,
        "weight": workout_set.weight,
        "rir": workout_set.rir,
        "completedAt": _format_ts(workout_set.completed_at),
    }


def _exercise_to_dict(exercise: WorkoutExercise, session_id: str) -> dict:
    return {
        "id": exercise.exercise_id,
        "sessionId": session_id,
        "name": exercise.name,
        "sortOrder": exercise.sort_order,
        "sets": [_set_to_dict(s, exercise.exercise_id) for s in exercise.sets],
    }


def session_to_snapshot(session: ActiveSession) -> dict:
    """Convert an ActiveSession to its JSON-compatible snapshot dict."""
    return {
        "sessionId": session.session_id,
        "startedAt": _format_ts(session.started_at),
        "currentExerciseId": session.current_exercise_id,
        "exercises": [_exercise_to_dict(ex, session.session_id) for ex in session.exercises],
        "isPaused": session.is_paused,
        "pausedAt": _format_ts(session.paused_at) if session.paused_at else None,
        "pausePeriods": [
            {"pausedAt": _format_ts(p.paused_at), "resumedAt": _format_ts(p.resumed_at)}
            for p in session.pause_periods
        ],
    }


def dumps_snapshot(session: ActiveSession) -> str:
    return json.dumps(session_to_snapshot(session))


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _set_from_dict(raw: dict, index: int) -> WorkoutSet:
    weight = raw.get("weight")
    rir = raw.get("rir")
    set_id = raw.get("id")
    return WorkoutSet(
        set_number=int(raw.get("setNumber", index + 1)),
        reps=int(raw["reps"]),
        completed_at=_parse_ts(raw.get("completedAt"), "completedAt"),
        weight=float(weight) if weight is not None else None,
        rir=int(rir) if rir is not None else None,
        set_id=str(set_id) if set_id is not None else None,
    )


def _exercise_from_dict(raw: dict, index: int) -> WorkoutExercise:
    return WorkoutExercise(
        exercise_id=str(raw["id"]),
        name=str(raw.get("name", "")),
        sort_order=int(raw.get("sortOrder", index)),
        sets=tuple(_set_from_dict(s, i) for i, s in enumerate(raw.get("sets") or [])),
    )


def session_from_snapshot(data: dict) -> ActiveSession:
    """Rebuild an ActiveSession from a snapshot dict.

    Raises:
        SnapshotDecodeError: if required fields are missing or malformed.
    """
    if not isinstance(data, dict):
        raise SnapshotDecodeError(f"Snapshot must be an object, got {type(data).__name__}")
    try:
        paused_at = None
        if data.get("isPaused", data.get("pausedAt") is not None):
            paused_at = _parse_ts(data.get("pausedAt"), "pausedAt")
        return ActiveSession(
            session_id=str(data["sessionId"]),
            started_at=_parse_ts(data.get("startedAt"), "startedAt"),
            current_exercise_id=data.get("currentExerciseId"),
            exercises=tuple(
                _exercise_from_dict(ex, i) for i, ex in enumerate(data.get("exercises") or [])
            ),
            paused_at=paused_at,
            pause_periods=tuple(
                PausePeriod(
                    paused_at=_parse_ts(p.get("pausedAt"), "pausePeriods.pausedAt"),
                    resumed_at=_parse_ts(p.get("resumedAt"), "pausePeriods.resumedAt"),
                )
                for p in data.get("pausePeriods") or []
            ),
        )
    except SnapshotDecodeError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as exc:
        raise SnapshotDecodeError(f"Malformed snapshot: {exc!r}") from exc


def loads_snapshot(text: str) -> ActiveSession:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SnapshotDecodeError(f"Snapshot is not valid JSON: {exc}") from exc
    return session_from_snapshot(data)
