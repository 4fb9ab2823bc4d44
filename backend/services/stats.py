import logging
from dataclasses import dataclass, field
from datetime import datetime

from backend.services.effort import EffortSummary, summarize_effort
from backend.services.snapshot import ExerciseRecord, SessionRecord
from backend.services.trend import (
    HistoryPoint,
    TrendStatus,
    classify_trend,
    history_series,
    session_points,
)
from backend.services.units import Unit, format_weight

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExerciseStats:
    exercise_id: int
    exercise_name: str
    last_session_date: datetime | None
    current_e1rm: float
    previous_avg_e1rm: float
    trend_percent: float
    status: TrendStatus
    history: list[HistoryPoint] = field(default_factory=list)
    avg_rir: float | None = None
    avg_rpe: float | None = None


def calculate_exercise_stats(
    exercise: ExerciseRecord,
    sessions: list[SessionRecord],
    unit: Unit,
    include_effort: bool = True,
) -> ExerciseStats:
    """Summarise one exercise's trajectory with weights in `unit`."""
    points = session_points(exercise.id, sessions)
    trend = classify_trend(points)

    effort = summarize_effort(exercise.id, sessions) if include_effort else EffortSummary()

    if trend.status == "new":
        return ExerciseStats(
            exercise_id=exercise.id,
            exercise_name=exercise.name,
            last_session_date=None,
            current_e1rm=0,
            previous_avg_e1rm=0,
            trend_percent=0,
            status="new",
            avg_rir=effort.avg_rir,
            avg_rpe=effort.avg_rpe,
        )

    return ExerciseStats(
        exercise_id=exercise.id,
        exercise_name=exercise.name,
        last_session_date=points[0].date,
        current_e1rm=format_weight(trend.current, unit, 0),
        previous_avg_e1rm=format_weight(trend.baseline, unit, 0),
        trend_percent=trend.trend_percent,
        status=trend.status,
        history=history_series(points, unit),
        avg_rir=effort.avg_rir,
        avg_rpe=effort.avg_rpe,
    )


def _last_session_timestamp(stats: ExerciseStats) -> float:
    if stats.last_session_date is None:
        return 0.0
    return stats.last_session_date.timestamp()


def calculate_all_exercise_stats(
    exercises: list[ExerciseRecord],
    sessions: list[SessionRecord],
    unit: Unit,
    include_effort: bool = True,
) -> list[ExerciseStats]:
    """Stats for every exercise, most recently trained first; never-logged last."""
    results = [calculate_exercise_stats(ex, sessions, unit, include_effort) for ex in exercises]
    logger.debug(
        "Computed stats for %d exercises over %d sessions", len(results), len(sessions)
    )
    return sorted(results, key=_last_session_timestamp, reverse=True)
