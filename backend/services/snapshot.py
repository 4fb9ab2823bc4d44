"""In-memory records consumed by the analytics core, and the loaders that
build them from stored rows.

The analytics functions never touch the database: routers load a snapshot of
one user's exercises and sessions here and hand the records to the pure
functions in units/e1rm/buckets/trend/effort/stats.
"""

from dataclasses import dataclass, field
from datetime import datetime

from sqlmodel import Session, select

from backend.models import Exercise, SetEntry, WorkoutEntry, WorkoutSession


@dataclass(frozen=True)
class ExerciseRecord:
    id: int
    name: str
    muscle_group: str = ""
    is_custom: bool = False


@dataclass(frozen=True)
class SetRecord:
    weight: float  # kg
    reps: int
    rir: int | None = None
    rpe: float | None = None
    is_warmup: bool = False
    id: int | None = None


@dataclass(frozen=True)
class EntryRecord:
    exercise_id: int
    sets: list[SetRecord] = field(default_factory=list)
    variant: str | None = None
    id: int | None = None


def wall_clock(value: datetime) -> datetime:
    """Drop the offset of an aware datetime, keeping its local reading.

    Sessions are bucketed by the calendar day the lifter trained on, so
    "2024-01-15T23:30-05:00" stays on the 15th.
    """
    return value.replace(tzinfo=None)


@dataclass(frozen=True)
class SessionRecord:
    """A logged session. `date` is always held naive (wall-clock)."""

    id: int
    date: datetime
    entries: list[EntryRecord] = field(default_factory=list)
    note: str | None = None

    def __post_init__(self):
        if self.date.tzinfo is not None:
            object.__setattr__(self, "date", wall_clock(self.date))


def sets_for_exercise(record: SessionRecord, exercise_id: int) -> list[SetRecord] | None:
    """Pool the sets of every entry of `exercise_id` in a session.

    Returns None when the session does not contain the exercise at all, so
    callers can tell "not performed" apart from "performed with no sets".
    """
    entries = [e for e in record.entries if e.exercise_id == exercise_id]
    if not entries:
        return None
    return [s for e in entries for s in e.sets]


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------


def exercise_record(exercise: Exercise) -> ExerciseRecord:
    return ExerciseRecord(
        id=exercise.id,
        name=exercise.name,
        muscle_group=exercise.muscle_group,
        is_custom=exercise.is_custom,
    )


def load_exercises(user_id: int, session: Session) -> list[ExerciseRecord]:
    exercises = session.exec(
        select(Exercise).where(Exercise.user_id == user_id).order_by(Exercise.name)
    ).all()
    return [exercise_record(ex) for ex in exercises]


def load_exercise(exercise_id: int, user_id: int, session: Session) -> ExerciseRecord | None:
    exercise = session.get(Exercise, exercise_id)
    if exercise is None or exercise.user_id != user_id:
        return None
    return exercise_record(exercise)


def load_sessions(user_id: int, session: Session) -> list[SessionRecord]:
    """Return every session of the user, newest first, fully resolved."""
    workouts = session.exec(
        select(WorkoutSession)
        .where(WorkoutSession.user_id == user_id)
        .order_by(WorkoutSession.date.desc(), WorkoutSession.id.desc())
    ).all()
    return _resolve_sessions(workouts, session)


def load_session(session_id: int, user_id: int, session: Session) -> SessionRecord | None:
    workout = session.get(WorkoutSession, session_id)
    if workout is None or workout.user_id != user_id:
        return None
    return _resolve_sessions([workout], session)[0]


def _resolve_sessions(workouts: list[WorkoutSession], session: Session) -> list[SessionRecord]:
    if not workouts:
        return []

    workout_ids = [w.id for w in workouts]
    entries = session.exec(
        select(WorkoutEntry)
        .where(WorkoutEntry.session_id.in_(workout_ids))
        .order_by(WorkoutEntry.display_order, WorkoutEntry.id)
    ).all()

    sets_by_entry: dict[int, list[SetRecord]] = {e.id: [] for e in entries}
    if entries:
        rows = session.exec(
            select(SetEntry)
            .where(SetEntry.entry_id.in_(list(sets_by_entry)))
            .order_by(SetEntry.set_number, SetEntry.id)
        ).all()
        for s in rows:
            sets_by_entry[s.entry_id].append(
                SetRecord(
                    id=s.id,
                    weight=s.weight,
                    reps=s.reps,
                    rir=s.rir,
                    rpe=s.rpe,
                    is_warmup=s.is_warmup,
                )
            )

    entries_by_session: dict[int, list[EntryRecord]] = {w.id: [] for w in workouts}
    for e in entries:
        entries_by_session[e.session_id].append(
            EntryRecord(
                id=e.id,
                exercise_id=e.exercise_id,
                variant=e.variant,
                sets=sets_by_entry[e.id],
            )
        )

    return [
        SessionRecord(
            id=w.id,
            date=w.date,
            note=w.note,
            entries=entries_by_session[w.id],
        )
        for w in workouts
    ]
