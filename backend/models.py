from pydantic import NaiveDatetime
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    name: str
    alias: str = ""
    weight_unit: str = "kg"  # "kg" or "lb", display only


class Exercise(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    name: str = Field(index=True)
    muscle_group: str = ""
    is_custom: bool = True


class WorkoutSession(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    date: NaiveDatetime = Field(sa_type=DateTime)  # wall-clock time of the lifter
    note: str | None = None


class WorkoutEntry(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="workoutsession.id", index=True)
    exercise_id: int = Field(foreign_key="exercise.id", index=True)
    variant: str | None = None
    display_order: int = 0


class SetEntry(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    entry_id: int = Field(foreign_key="workoutentry.id", index=True)
    set_number: int
    weight: float  # stored in kg
    reps: int
    rir: int | None = None
    rpe: float | None = None
    is_warmup: bool = False
