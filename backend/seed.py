"""
Seed the database with a demo user and realistic fake progression data.
Run with: python -m backend.seed

WARNING: Drops all existing data before inserting.
"""

import logging
import random
from datetime import datetime, timedelta

from sqlmodel import Session, SQLModel, select

from backend.config import settings
from backend.database import engine
from backend.log import setup_logging
from backend.models import Exercise, SetEntry, User, WorkoutEntry, WorkoutSession
from backend.routers.users import seed_default_exercises

logger = logging.getLogger(__name__)

# Reproducible data
RANDOM_SEED = 42

# Base working weights in kg per default exercise (None = bodyweight).
BASE_WEIGHTS: dict[str, float | None] = {
    "Press de Banca": 80.0,
    "Sentadilla (Squat)": 100.0,
    "Peso Muerto": 120.0,
    "Press Militar": 50.0,
    "Dominadas": None,
}

# Each session trains these exercises, cycling through the templates.
SESSION_TEMPLATES = [
    ["Press de Banca", "Dominadas"],
    ["Sentadilla (Squat)", "Peso Muerto"],
    ["Press Militar", "Press de Banca", "Dominadas"],
]

NOTES = ["", "Buena sesión", "Cansado", "", "PR!", "Deload", ""]

NUM_SESSIONS = 40
INTERVAL_DAYS = 4


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _progression_weight(base: float, session_idx: int, rng: random.Random) -> float:
    """Progressive overload with realistic noise. Rounds to nearest 2.5 kg."""
    factor = 1.0 + 0.01 * session_idx + rng.uniform(-0.04, 0.04)
    return round(base * factor / 2.5) * 2.5


def _effort(rng: random.Random) -> tuple[int | None, float | None]:
    """Log RIR, RPE, both or neither, like a real lifter would."""
    rir = rng.randint(0, 4)
    choice = rng.random()
    if choice < 0.4:
        return rir, None
    if choice < 0.7:
        return None, float(10 - rir)
    if choice < 0.85:
        return rir, float(10 - rir)
    return None, None


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def seed() -> None:
    rng = random.Random(RANDOM_SEED)
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        # Wipe existing data (order matters for FK constraints)
        for model in [SetEntry, WorkoutEntry, WorkoutSession, Exercise, User]:
            for row in session.exec(select(model)).all():
                session.delete(row)
        session.commit()
        logger.info("Cleared existing data.")

        user = User(name="Usuario Demo", alias="JP", weight_unit=settings.default_unit)
        session.add(user)
        session.commit()
        session.refresh(user)

        exercises = {ex.name: ex for ex in seed_default_exercises(user, session)}
        for ex in exercises.values():
            session.refresh(ex)
        logger.info("Created demo user %s with %d exercises.", user.id, len(exercises))

        start = datetime.now().replace(hour=18, minute=0, second=0, microsecond=0)
        start -= timedelta(days=NUM_SESSIONS * INTERVAL_DAYS)

        for session_idx in range(NUM_SESSIONS):
            template = SESSION_TEMPLATES[session_idx % len(SESSION_TEMPLATES)]
            workout = WorkoutSession(
                user_id=user.id,
                date=start + timedelta(days=session_idx * INTERVAL_DAYS),
                note=NOTES[session_idx % len(NOTES)] or None,
            )
            session.add(workout)
            session.commit()
            session.refresh(workout)

            for order, name in enumerate(template):
                entry = WorkoutEntry(
                    session_id=workout.id,
                    exercise_id=exercises[name].id,
                    display_order=order,
                )
                session.add(entry)
                session.commit()
                session.refresh(entry)

                base = BASE_WEIGHTS[name]
                set_number = 1
                if base is not None:
                    # One warm-up at roughly half the working weight
                    session.add(
                        SetEntry(
                            entry_id=entry.id,
                            set_number=set_number,
                            weight=round(base * 0.5 / 2.5) * 2.5,
                            reps=8,
                            is_warmup=True,
                        )
                    )
                    set_number += 1

                for _ in range(rng.randint(3, 4)):
                    rir, rpe = _effort(rng)
                    session.add(
                        SetEntry(
                            entry_id=entry.id,
                            set_number=set_number,
                            # Bodyweight lifts are logged with the added load only
                            weight=_progression_weight(base, session_idx, rng) if base else 0.0,
                            reps=rng.randint(4, 10),
                            rir=rir,
                            rpe=rpe,
                        )
                    )
                    set_number += 1

            session.commit()

        logger.info("Created %d sessions. Seed complete.", NUM_SESSIONS)


if __name__ == "__main__":
    setup_logging(settings.log_format, settings.log_level)
    seed()
