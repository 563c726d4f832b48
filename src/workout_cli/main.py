"""fittrack: command-line host for the workout session engine.

Each invocation restores the active session from the state directory, runs
one command, and saves the snapshot again if the command changed it.

Usage:
    fittrack start --exercise "Bench Press" --exercise "Dumbbell Row"
    fittrack add-set "Bench Press" --reps 8 --weight 80 --rir 2
    fittrack pause | resume | status | stats | end
    fittrack suggest --tags Chest --equipment Dumbbells --from-session
    fittrack watch                      # APScheduler tick loop
"""

from __future__ import annotations

import argparse
import logging
import sys
import uuid
from typing import Callable, Sequence

from kv_store import FileKeyValueStore, KeyValueStore
from session_engine.catalog import ExerciseCatalog, load_catalog
from session_engine.exceptions import SessionEngineError
from session_engine.math.clock import (
    format_duration,
    format_duration_human,
    has_reached_rest_target,
    recommended_rest_seconds,
    rest_elapsed_ms,
    utc_now,
)
from session_engine.math.performance import (
    average_reserve,
    best_one_rep_max,
    ema,
    total_volume,
    workout_stats,
)
from session_engine.models.enums import OneRepMaxFormula, SessionStatus
from session_engine.models.recommendation import RecommendationContext
from session_engine.models.workout import ActiveSession, WorkoutExercise, WorkoutSet
from session_engine.recommendation import rank_exercises
from session_engine.session import PersistentSession, SessionTimer
from session_engine.session.persistence import load_snapshot
from session_engine.session.state_machine import Clock
from session_engine.validation import check_set_capacity, validate_set_input

from workout_cli import config

logger = logging.getLogger(__name__)

Printer = Callable[[str], None]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def _parse_volume(raw: str) -> tuple[str, float]:
    """argparse type for MUSCLE=VOLUME pairs."""
    muscle, sep, value = raw.partition("=")
    if not sep or not muscle.strip():
        raise argparse.ArgumentTypeError(f"expected MUSCLE=VOLUME, got {raw!r}")
    try:
        return muscle.strip(), float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"volume must be a number, got {value!r}") from None


def _positive_int(raw: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {raw!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _require_session(session: ActiveSession | None) -> ActiveSession:
    if session is None:
        raise SessionEngineError("No active session. Start one with 'fittrack start'.")
    return session


def _resolve_exercise(session: ActiveSession, ref: str) -> WorkoutExercise:
    """Find an exercise by id, then by case-insensitive name."""
    exercise = session.exercise(ref)
    if exercise is not None:
        return exercise
    for ex in session.exercises:
        if ex.name.lower() == ref.lower():
            return ex
    raise SessionEngineError(f"No exercise {ref!r} in the current session")


def _build_exercises(names: Sequence[str], start_order: int = 0) -> list[WorkoutExercise]:
    return [
        WorkoutExercise(exercise_id=_new_id(), name=name, sort_order=start_order + i)
        for i, name in enumerate(names)
    ]


def _load_catalog() -> ExerciseCatalog:
    return load_catalog(config.CATALOG_PATH or None)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_start(args: argparse.Namespace, tracker: PersistentSession, out: Printer) -> int:
    if tracker.session is not None:
        logger.warning("Replacing active session %s", tracker.session.session_id)
    session = tracker.start(args.session_id or _new_id(), _build_exercises(args.exercise))
    out(f"Started session {session.session_id}")
    for ex in session.exercises:
        out(f"  [{ex.exercise_id}] {ex.name}")
    return 0


def cmd_pause(args: argparse.Namespace, tracker: PersistentSession, out: Printer) -> int:
    tracker.pause()
    if tracker.session is None:
        out("No active session")
    else:
        out(f"Paused at {format_duration(tracker.machine.elapsed_ms())}")
    return 0


def cmd_resume(args: argparse.Namespace, tracker: PersistentSession, out: Printer) -> int:
    tracker.resume()
    if tracker.session is None:
        out("No active session")
    else:
        out(f"Resumed at {format_duration(tracker.machine.elapsed_ms())}")
    return 0


def cmd_add_set(args: argparse.Namespace, tracker: PersistentSession, out: Printer) -> int:
    session = _require_session(tracker.session)
    exercise = _resolve_exercise(session, args.exercise)
    validate_set_input(args.reps, args.weight, args.rir, units=config.UNITS)
    check_set_capacity(exercise)

    workout_set = WorkoutSet(
        set_number=tracker.machine.next_set_number(exercise.exercise_id),
        reps=args.reps,
        weight=args.weight,
        rir=args.rir,
        completed_at=tracker.machine.now(),
        set_id=_new_id(),
    )
    tracker.add_set(exercise.exercise_id, workout_set)
    tracker.set_current_exercise(exercise.exercise_id)

    rest_s = recommended_rest_seconds(args.reps, args.rir)
    weight = f" x {args.weight:g}" if args.weight is not None else ""
    out(f"{exercise.name}: set {workout_set.set_number} logged ({args.reps}{weight})")
    out(f"Recommended rest: {format_duration_human(rest_s * 1000)}")
    return 0


def cmd_current(args: argparse.Namespace, tracker: PersistentSession, out: Printer) -> int:
    session = _require_session(tracker.session)
    if args.clear:
        tracker.set_current_exercise(None)
        out("Current exercise cleared")
        return 0
    exercise = _resolve_exercise(session, args.exercise)
    tracker.set_current_exercise(exercise.exercise_id)
    out(f"Current exercise: {exercise.name}")
    return 0


def cmd_exercises(args: argparse.Namespace, tracker: PersistentSession, out: Printer) -> int:
    session = _require_session(tracker.session)
    exercises = list(session.exercises)
    if args.remove:
        removed = {_resolve_exercise(session, ref).exercise_id for ref in args.remove}
        exercises = [ex for ex in exercises if ex.exercise_id not in removed]
    if args.add:
        next_order = max((ex.sort_order for ex in exercises), default=-1) + 1
        exercises.extend(_build_exercises(args.add, start_order=next_order))
    if args.add or args.remove:
        tracker.update_exercises(exercises)
    for ex in _require_session(tracker.session).exercises:
        marker = "*" if ex.exercise_id == tracker.session.current_exercise_id else " "
        out(f"{marker} [{ex.exercise_id}] {ex.name} ({len(ex.sets)} sets)")
    return 0


def cmd_status(args: argparse.Namespace, tracker: PersistentSession, out: Printer) -> int:
    session = tracker.session
    if session is None:
        out("No active session")
        return 0
    state = "paused" if tracker.machine.status == SessionStatus.PAUSED else "running"
    out(f"Session {session.session_id} ({state}) {format_duration(tracker.machine.elapsed_ms())}")
    current = session.exercise(session.current_exercise_id) if session.current_exercise_id else None
    if current is not None:
        out(f"Current: {current.name}")
    for ex in session.exercises:
        out(f"  {ex.name}: {len(ex.sets)} sets, {total_volume(ex.sets):g} volume")
    return 0


def cmd_rest(args: argparse.Namespace, tracker: PersistentSession, out: Printer) -> int:
    if args.reps is not None:
        out(f"Recommended rest: {recommended_rest_seconds(args.reps, args.rir)}s")
        return 0

    session = _require_session(tracker.session)
    sets = session.all_sets
    if not sets:
        out("No sets logged yet")
        return 0
    last = max(sets, key=lambda s: s.completed_at)
    target_s = recommended_rest_seconds(last.reps, last.rir)
    now = tracker.machine.now()
    rested = rest_elapsed_ms(last.completed_at, now)
    done = has_reached_rest_target(last.completed_at, target_s, now)
    out(
        f"Rested {format_duration(rested)} of {format_duration(target_s * 1000)}"
        f"{' - ready' if done else ''}"
    )
    return 0


def _print_stats(session: ActiveSession, duration_ms: int, ema_period: int, out: Printer) -> None:
    sets = session.all_sets
    stats = workout_stats(sets, duration_ms)
    out(f"Duration: {format_duration_human(stats.total_duration_ms)}")
    out(f"Sets: {stats.total_sets}  Reps: {stats.total_reps}  Volume: {stats.total_volume:g}")
    out(f"Strength score: {stats.strength_score:g}  Avg RIR: {average_reserve(sets):.1f}")
    for ex in session.exercises:
        if not ex.sets:
            continue
        epley = best_one_rep_max(ex.sets, OneRepMaxFormula.EPLEY)
        brzycki = best_one_rep_max(ex.sets, OneRepMaxFormula.BRZYCKI)
        out(f"  {ex.name}: est. 1RM {epley:.1f} (Epley) / {brzycki:.1f} (Brzycki)")
    per_set = [(s.weight or 0.0) * s.reps for s in sorted(sets, key=lambda s: s.completed_at)]
    if per_set:
        trend = ", ".join(f"{v:.0f}" for v in ema(per_set, period=ema_period))
        out(f"Set volume trend (EMA {ema_period}): {trend}")


def cmd_stats(args: argparse.Namespace, tracker: PersistentSession, out: Printer) -> int:
    session = _require_session(tracker.session)
    _print_stats(session, tracker.machine.elapsed_ms(), args.ema_period, out)
    return 0


def cmd_end(args: argparse.Namespace, tracker: PersistentSession, out: Printer) -> int:
    duration_ms = tracker.machine.elapsed_ms()
    ended = tracker.end()
    if ended is None:
        out("No active session")
        return 0
    out(f"Ended session {ended.session_id}")
    _print_stats(ended, duration_ms, args.ema_period, out)
    return 0


def cmd_suggest(args: argparse.Namespace, tracker: PersistentSession, out: Printer) -> int:
    existing = list(args.existing)
    if args.from_session and tracker.session is not None:
        existing.extend(ex.name for ex in tracker.session.exercises)
    context = RecommendationContext(
        day_tags=tuple(args.tags),
        equipment=tuple(args.equipment),
        existing_exercises=tuple(existing),
        recent_volume=dict(args.volume),
    )
    ranked = rank_exercises(context, _load_catalog(), limit=args.limit)
    if not ranked:
        out("No suggestions for this equipment")
        return 0
    for i, item in enumerate(ranked, start=1):
        out(f"{i}. {item.template.name} ({item.score:+g}) - {item.reason}")
    return 0


def cmd_watch(args: argparse.Namespace, tracker: PersistentSession, out: Printer) -> int:
    from apscheduler.schedulers.blocking import BlockingScheduler

    store = tracker.store
    timer = SessionTimer(tracker.machine)

    def tick() -> None:
        # Other invocations may have paused or ended the session since
        tracker.machine.session = load_snapshot(store)
        reading = timer.tick()
        state = "running" if reading.is_running else "paused"
        if tracker.machine.session is None:
            state = "no session"
        out(f"{reading.formatted} ({state})")

    tick()
    scheduler = BlockingScheduler()
    scheduler.add_job(tick, "interval", seconds=config.TICK_SECONDS, id="session_tick")
    logger.debug("Tick loop started every %.1fs", config.TICK_SECONDS)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Tick loop stopped")
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fittrack", description="Workout session tracker")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("start", help="Start a new session (replaces any active one)")
    p.add_argument("--exercise", "-e", action="append", default=[], help="Exercise name")
    p.add_argument("--session-id", default=None)
    p.set_defaults(func=cmd_start)

    sub.add_parser("pause", help="Pause the session clock").set_defaults(func=cmd_pause)
    sub.add_parser("resume", help="Resume the session clock").set_defaults(func=cmd_resume)

    p = sub.add_parser("add-set", help="Log a completed set")
    p.add_argument("exercise", help="Exercise id or name")
    p.add_argument("--reps", type=int, required=True)
    p.add_argument("--weight", type=float, default=None)
    p.add_argument("--rir", type=int, default=None)
    p.set_defaults(func=cmd_add_set)

    p = sub.add_parser("current", help="Set the current exercise")
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("exercise", nargs="?", help="Exercise id or name")
    group.add_argument("--clear", action="store_true")
    p.set_defaults(func=cmd_current)

    p = sub.add_parser("exercises", help="List or edit the session's exercises")
    p.add_argument("--add", action="append", default=[], metavar="NAME")
    p.add_argument("--remove", action="append", default=[], metavar="EXERCISE")
    p.set_defaults(func=cmd_exercises)

    sub.add_parser("status", help="Show the active session").set_defaults(func=cmd_status)

    p = sub.add_parser("rest", help="Rest timer for the last set, or a rest recommendation")
    p.add_argument("--reps", type=int, default=None)
    p.add_argument("--rir", type=int, default=None)
    p.set_defaults(func=cmd_rest)

    for name, func, help_text in (
        ("stats", cmd_stats, "Show analytics for the active session"),
        ("end", cmd_end, "End the session and show its summary"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--ema-period", type=_positive_int, default=7)
        p.set_defaults(func=func)

    p = sub.add_parser("suggest", help="Suggest exercises for a training day")
    p.add_argument("--tags", nargs="+", default=[], help="Muscle groups for the day")
    p.add_argument("--equipment", nargs="+", default=[], help="Available equipment")
    p.add_argument("--existing", action="append", default=[], help="Already chosen exercise")
    p.add_argument("--from-session", action="store_true", help="Exclude the session's exercises")
    p.add_argument(
        "--volume", type=_parse_volume, action="append", default=[], metavar="MUSCLE=VOLUME"
    )
    p.add_argument("--limit", type=_positive_int, default=5)
    p.set_defaults(func=cmd_suggest)

    sub.add_parser("watch", help="Live session clock").set_defaults(func=cmd_watch)
    return parser


def run(
    argv: Sequence[str] | None = None,
    store: KeyValueStore | None = None,
    clock: Clock = utc_now,
    out: Printer = print,
) -> int:
    """Parse *argv* and run one command against the persisted session."""
    args = build_parser().parse_args(argv)
    if store is None:
        store = FileKeyValueStore(config.STATE_DIR)
    tracker = PersistentSession(store, clock=clock)
    try:
        return args.func(args, tracker, out)
    except SessionEngineError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


def main() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    sys.exit(run())


if __name__ == "__main__":
    main()
