"""Average RIR/RPE of the most recent session of an exercise.

Kept apart from the trend math so stats can be computed with or without it.
"""

from dataclasses import dataclass

from backend.services.e1rm import rir_from_rpe, rpe_from_rir, working_sets
from backend.services.snapshot import SessionRecord, SetRecord, sets_for_exercise
from backend.services.units import round_half_up


@dataclass(frozen=True)
class EffortSummary:
    avg_rir: float | None = None
    avg_rpe: float | None = None


def _set_rir(s: SetRecord) -> float | None:
    if s.rir is not None:
        return s.rir
    if s.rpe is not None:
        return rir_from_rpe(s.rpe)
    return None


def _set_rpe(s: SetRecord) -> float | None:
    if s.rpe is not None:
        return s.rpe
    if s.rir is not None:
        return rpe_from_rir(s.rir)
    return None


def _average(values: list[float]) -> float | None:
    if not values:
        return None
    return round_half_up(sum(values) / len(values), 1)


def latest_session_sets(exercise_id: int, sessions: list[SessionRecord]) -> list[SetRecord] | None:
    """Sets of the exercise in the most recent session that contains it."""
    latest: SessionRecord | None = None
    latest_sets: list[SetRecord] | None = None
    for record in sessions:
        sets = sets_for_exercise(record, exercise_id)
        if sets is None:
            continue
        # strict comparison keeps the first of equally dated sessions
        if latest is None or record.date > latest.date:
            latest, latest_sets = record, sets
    return latest_sets


def summarize_effort(exercise_id: int, sessions: list[SessionRecord]) -> EffortSummary:
    sets = latest_session_sets(exercise_id, sessions)
    if sets is None:
        return EffortSummary()

    work = working_sets(sets)
    rir_values = [v for v in (_set_rir(s) for s in work) if v is not None]
    rpe_values = [v for v in (_set_rpe(s) for s in work) if v is not None]
    return EffortSummary(avg_rir=_average(rir_values), avg_rpe=_average(rpe_values))
