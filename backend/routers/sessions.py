import logging
from datetime import datetime
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Field, Session, SQLModel, select

from backend.database import get_session
from backend.models import Exercise, SetEntry, WorkoutEntry, WorkoutSession
from backend.routers.users import UserDep
from backend.services.snapshot import SessionRecord, load_session, load_sessions, wall_clock
from backend.services.units import to_kg

logger = logging.getLogger(__name__)

router = APIRouter()

SessionDep = Annotated[Session, Depends(get_session)]


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class SetRead(SQLModel):
    id: int
    weight: float
    reps: int
    rir: int | None
    rpe: float | None
    is_warmup: bool


class EntryRead(SQLModel):
    id: int
    exercise_id: int
    variant: str | None
    sets: list[SetRead]


class SessionRead(SQLModel):
    id: int
    date: datetime
    note: str | None
    entries: list[EntryRead]


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class SetCreate(SQLModel):
    weight: float = Field(ge=0)
    reps: int = Field(ge=0)
    rir: int | None = Field(default=None, ge=0, le=10)
    rpe: float | None = Field(default=None, ge=1, le=10)
    is_warmup: bool = False


class EntryCreate(SQLModel):
    exercise_id: int
    variant: str | None = None
    sets: list[SetCreate] = []


class SessionCreate(SQLModel):
    date: datetime | None = None  # an offset, if given, is dropped
    note: str | None = None
    unit: Literal["kg", "lb"] = "kg"  # unit the set weights are typed in
    entries: list[EntryCreate]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_owned_session(session_id: int, user_id: int, session: Session) -> WorkoutSession:
    workout = session.get(WorkoutSession, session_id)
    if workout is None or workout.user_id != user_id:
        raise HTTPException(status_code=404, detail="Session not found")
    return workout


def _session_read(record: SessionRecord) -> SessionRead:
    return SessionRead(
        id=record.id,
        date=record.date,
        note=record.note,
        entries=[
            EntryRead(
                id=e.id,
                exercise_id=e.exercise_id,
                variant=e.variant,
                sets=[
                    SetRead(
                        id=s.id,
                        weight=s.weight,
                        reps=s.reps,
                        rir=s.rir,
                        rpe=s.rpe,
                        is_warmup=s.is_warmup,
                    )
                    for s in e.sets
                ],
            )
            for e in record.entries
        ],
    )


def _build_session_read(session_id: int, user_id: int, session: Session) -> SessionRead:
    return _session_read(load_session(session_id, user_id, session))


def delete_entry_cascade(entry: WorkoutEntry, session: Session) -> None:
    """Delete the sets of an entry, then the entry itself (no commit)."""
    sets = session.exec(select(SetEntry).where(SetEntry.entry_id == entry.id)).all()
    for s in sets:
        session.delete(s)
    session.delete(entry)


def delete_session_cascade(workout: WorkoutSession, session: Session) -> None:
    """Delete SetEntries -> WorkoutEntries -> WorkoutSession (SQLite has no auto-cascade)."""
    entries = session.exec(
        select(WorkoutEntry).where(WorkoutEntry.session_id == workout.id)
    ).all()
    for entry in entries:
        delete_entry_cascade(entry, session)
    session.delete(workout)
    session.commit()


def delete_empty_sessions(session_ids: set[int], session: Session) -> None:
    """Remove sessions from `session_ids` that no longer have any entry."""
    for session_id in session_ids:
        remaining = session.exec(
            select(WorkoutEntry).where(WorkoutEntry.session_id == session_id)
        ).first()
        if remaining is None:
            workout = session.get(WorkoutSession, session_id)
            if workout is not None:
                session.delete(workout)
    session.commit()


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get("/", response_model=list[SessionRead])
def list_sessions(user: UserDep, session: SessionDep):
    return [_session_read(record) for record in load_sessions(user.id, session)]


@router.post("/", response_model=SessionRead, status_code=201)
def create_session(body: SessionCreate, user: UserDep, session: SessionDep):
    if not body.entries:
        raise HTTPException(status_code=400, detail="A session needs at least one entry")

    for entry in body.entries:
        exercise = session.get(Exercise, entry.exercise_id)
        if exercise is None or exercise.user_id != user.id:
            raise HTTPException(
                status_code=400,
                detail=f"Exercise with id {entry.exercise_id} does not exist",
            )

    date = wall_clock(body.date) if body.date is not None else datetime.now()
    workout = WorkoutSession(user_id=user.id, date=date, note=body.note)
    session.add(workout)
    session.commit()
    session.refresh(workout)

    for order, entry in enumerate(body.entries):
        wl = WorkoutEntry(
            session_id=workout.id,
            exercise_id=entry.exercise_id,
            variant=entry.variant,
            display_order=order,
        )
        session.add(wl)
        session.commit()
        session.refresh(wl)
        for set_number, s in enumerate(entry.sets, start=1):
            session.add(
                SetEntry(
                    entry_id=wl.id,
                    set_number=set_number,
                    weight=to_kg(s.weight, body.unit),
                    reps=s.reps,
                    rir=s.rir,
                    rpe=s.rpe,
                    is_warmup=s.is_warmup,
                )
            )
    session.commit()

    logger.info("User %s logged session %s with %d entries", user.id, workout.id, len(body.entries))
    return _build_session_read(workout.id, user.id, session)


@router.get("/{session_id}", response_model=SessionRead)
def get_workout_session(session_id: int, user: UserDep, session: SessionDep):
    workout = _get_owned_session(session_id, user.id, session)
    return _build_session_read(workout.id, user.id, session)


@router.delete("/{session_id}", status_code=204)
def delete_workout_session(session_id: int, user: UserDep, session: SessionDep):
    workout = _get_owned_session(session_id, user.id, session)
    delete_session_cascade(workout, session)
    logger.info("User %s deleted session %s", user.id, session_id)


@router.delete("/{session_id}/entries/{entry_id}", status_code=204)
def delete_session_entry(session_id: int, entry_id: int, user: UserDep, session: SessionDep):
    workout = _get_owned_session(session_id, user.id, session)
    entry = session.get(WorkoutEntry, entry_id)
    if entry is None or entry.session_id != workout.id:
        raise HTTPException(status_code=404, detail="Entry not found")
    delete_entry_cascade(entry, session)
    session.commit()
    delete_empty_sessions({workout.id}, session)
    logger.info("User %s deleted entry %s from session %s", user.id, entry_id, session_id)
