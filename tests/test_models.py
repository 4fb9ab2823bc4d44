"""Smoke tests: verify all tables are created and basic records round-trip."""

from datetime import datetime

from sqlmodel import Session, select

from backend.models import Exercise, SetEntry, User, WorkoutEntry, WorkoutSession


def _user(session: Session) -> User:
    user = User(name="Ana")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def test_user_defaults_to_kg(session: Session):
    user = _user(session)
    assert user.id is not None
    assert user.weight_unit == "kg"
    assert user.alias == ""


def test_exercise_roundtrip(session: Session):
    user = _user(session)
    ex = Exercise(user_id=user.id, name="Press de Banca", muscle_group="Pecho", is_custom=False)
    session.add(ex)
    session.commit()
    stored = session.exec(select(Exercise)).one()
    assert stored.name == "Press de Banca"
    assert stored.is_custom is False


def test_session_entry_set_chain(session: Session):
    user = _user(session)
    ex = Exercise(user_id=user.id, name="Sentadilla")
    session.add(ex)
    session.commit()
    session.refresh(ex)

    workout = WorkoutSession(user_id=user.id, date=datetime(2024, 5, 1, 18, 30), note="PR!")
    session.add(workout)
    session.commit()
    session.refresh(workout)

    entry = WorkoutEntry(session_id=workout.id, exercise_id=ex.id, variant="low bar")
    session.add(entry)
    session.commit()
    session.refresh(entry)

    s = SetEntry(entry_id=entry.id, set_number=1, weight=102.5, reps=5, rpe=8.5)
    session.add(s)
    session.commit()

    stored = session.exec(select(SetEntry)).one()
    assert stored.weight == 102.5
    assert stored.rir is None
    assert stored.rpe == 8.5
    assert stored.is_warmup is False
    assert session.get(WorkoutSession, workout.id).date == datetime(2024, 5, 1, 18, 30)
