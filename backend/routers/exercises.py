import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, SQLModel, select

from backend.database import get_session
from backend.models import Exercise, SetEntry, WorkoutEntry, WorkoutSession
from backend.routers.sessions import delete_empty_sessions, delete_entry_cascade
from backend.routers.users import UserDep

logger = logging.getLogger(__name__)

router = APIRouter()

SessionDep = Annotated[Session, Depends(get_session)]


class ExerciseRead(SQLModel):
    id: int
    name: str
    muscle_group: str
    is_custom: bool


class ExerciseCreate(SQLModel):
    name: str
    muscle_group: str = ""


class ExerciseUpdate(SQLModel):
    name: str | None = None
    muscle_group: str | None = None


class LastSetRead(SQLModel):
    session_id: int
    weight: float
    reps: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def get_owned_exercise(exercise_id: int, user_id: int, session: Session) -> Exercise:
    exercise = session.get(Exercise, exercise_id)
    if exercise is None or exercise.user_id != user_id:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return exercise


def _verify_name_free(name: str, user_id: int, session: Session, exclude_id: int | None = None):
    existing = session.exec(
        select(Exercise).where(Exercise.user_id == user_id, Exercise.name == name)
    ).first()
    if existing is not None and existing.id != exclude_id:
        raise HTTPException(status_code=400, detail="Name already exists")


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get("/", response_model=list[ExerciseRead])
def list_exercises(user: UserDep, session: SessionDep):
    return session.exec(
        select(Exercise).where(Exercise.user_id == user.id).order_by(Exercise.name)
    ).all()


@router.post("/", response_model=ExerciseRead, status_code=201)
def create_exercise(body: ExerciseCreate, user: UserDep, session: SessionDep):
    _verify_name_free(body.name, user.id, session)
    exercise = Exercise(
        user_id=user.id, name=body.name, muscle_group=body.muscle_group, is_custom=True
    )
    session.add(exercise)
    session.commit()
    session.refresh(exercise)
    logger.info("User %s created exercise %s", user.id, exercise.id)
    return exercise


@router.patch("/{exercise_id}", response_model=ExerciseRead)
def update_exercise(exercise_id: int, body: ExerciseUpdate, user: UserDep, session: SessionDep):
    exercise = get_owned_exercise(exercise_id, user.id, session)
    if body.name is not None:
        _verify_name_free(body.name, user.id, session, exclude_id=exercise.id)
        exercise.name = body.name
    if body.muscle_group is not None:
        exercise.muscle_group = body.muscle_group
    session.add(exercise)
    session.commit()
    session.refresh(exercise)
    return exercise


@router.delete("/{exercise_id}", status_code=204)
def delete_exercise(exercise_id: int, user: UserDep, session: SessionDep):
    exercise = get_owned_exercise(exercise_id, user.id, session)
    entries = session.exec(
        select(WorkoutEntry).where(WorkoutEntry.exercise_id == exercise.id)
    ).all()
    touched = {e.session_id for e in entries}
    for entry in entries:
        delete_entry_cascade(entry, session)
    session.delete(exercise)
    session.commit()
    delete_empty_sessions(touched, session)
    logger.info("User %s deleted exercise %s (%d entries)", user.id, exercise_id, len(entries))


@router.get("/{exercise_id}/last-set", response_model=LastSetRead)
def last_set(exercise_id: int, user: UserDep, session: SessionDep):
    """Last set of the most recent session that logged this exercise."""
    exercise = get_owned_exercise(exercise_id, user.id, session)
    rows = session.exec(
        select(WorkoutEntry, WorkoutSession)
        .join(WorkoutSession, WorkoutSession.id == WorkoutEntry.session_id)
        .where(WorkoutEntry.exercise_id == exercise.id)
        .order_by(WorkoutSession.date.desc(), WorkoutEntry.id.desc())
    ).all()
    for entry, workout in rows:
        last = session.exec(
            select(SetEntry)
            .where(SetEntry.entry_id == entry.id)
            .order_by(SetEntry.set_number.desc())
        ).first()
        if last is not None:
            return LastSetRead(session_id=workout.id, weight=last.weight, reps=last.reps)
    raise HTTPException(status_code=404, detail="Exercise has no logged sets")
