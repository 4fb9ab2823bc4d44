import logging
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, SQLModel

from backend.config import settings
from backend.database import get_session
from backend.models import Exercise, User

logger = logging.getLogger(__name__)

router = APIRouter()

SessionDep = Annotated[Session, Depends(get_session)]

# Catalogue every new profile starts with (name, muscle group).
DEFAULT_EXERCISES: list[tuple[str, str]] = [
    ("Press de Banca", "Pecho"),
    ("Sentadilla (Squat)", "Pierna"),
    ("Peso Muerto", "Espalda/Pierna"),
    ("Press Militar", "Hombro"),
    ("Dominadas", "Espalda"),
]


class UserRead(SQLModel):
    id: int
    name: str
    alias: str
    weight_unit: str


class UserCreate(SQLModel):
    name: str
    alias: str = ""
    weight_unit: Literal["kg", "lb"] | None = None


class UserUpdate(SQLModel):
    name: str | None = None
    alias: str | None = None
    weight_unit: Literal["kg", "lb"] | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def get_user(user_id: int, session: SessionDep) -> User:
    """Dependency resolving the `user_id` path parameter to its profile."""
    user = session.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


UserDep = Annotated[User, Depends(get_user)]


def seed_default_exercises(user: User, session: Session) -> list[Exercise]:
    exercises = [
        Exercise(user_id=user.id, name=name, muscle_group=group, is_custom=False)
        for name, group in DEFAULT_EXERCISES
    ]
    for ex in exercises:
        session.add(ex)
    session.commit()
    return exercises


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.post("/", response_model=UserRead, status_code=201)
def create_user(body: UserCreate, session: SessionDep):
    user = User(
        name=body.name,
        alias=body.alias,
        weight_unit=body.weight_unit or settings.default_unit,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    seed_default_exercises(user, session)
    logger.info("Created user %s with %d default exercises", user.id, len(DEFAULT_EXERCISES))
    return user


@router.get("/{user_id}", response_model=UserRead)
def read_user(user: UserDep):
    return user


@router.patch("/{user_id}", response_model=UserRead)
def update_user(body: UserUpdate, user: UserDep, session: SessionDep):
    if body.name is not None:
        user.name = body.name
    if body.alias is not None:
        user.alias = body.alias
    if body.weight_unit is not None:
        user.weight_unit = body.weight_unit
    session.add(user)
    session.commit()
    session.refresh(user)
    return user
