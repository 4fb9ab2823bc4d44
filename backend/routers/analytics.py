from datetime import datetime
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, SQLModel

from backend.database import get_session
from backend.models import User
from backend.routers.users import UserDep
from backend.services.buckets import BucketRow, Timeframe, build_bucket_report
from backend.services.snapshot import load_exercise, load_exercises, load_sessions
from backend.services.stats import (
    ExerciseStats,
    calculate_all_exercise_stats,
    calculate_exercise_stats,
)
from backend.services.units import Unit, format_weight

router = APIRouter()

SessionDep = Annotated[Session, Depends(get_session)]


class HistoryPointRead(SQLModel):
    date: str
    e1rm: int


class ExerciseStatsRead(SQLModel):
    exercise_id: int
    exercise_name: str
    unit: str
    last_session_date: datetime | None
    current_e1rm: float
    previous_avg_e1rm: float
    trend_percent: float
    status: str
    history: list[HistoryPointRead]
    avg_rir: float | None
    avg_rpe: float | None


class BucketRowRead(SQLModel):
    key: str
    label: str
    sessions: int
    best_e1rm: float
    avg_e1rm: float
    volume: float
    avg_rir: float | None
    avg_rpe: float | None
    session_ids: list[int]


class BucketTotalsRead(SQLModel):
    best_e1rm: float
    avg_e1rm: float
    volume: float
    avg_rir: float | None
    avg_rpe: float | None


class BucketReportRead(SQLModel):
    exercise_id: int
    timeframe: str
    unit: str
    rows: list[BucketRowRead]
    totals: BucketTotalsRead


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve_unit(unit: str | None, user: User) -> Unit:
    return unit or user.weight_unit


def _stats_read(stats: ExerciseStats, unit: Unit) -> ExerciseStatsRead:
    return ExerciseStatsRead(
        exercise_id=stats.exercise_id,
        exercise_name=stats.exercise_name,
        unit=unit,
        last_session_date=stats.last_session_date,
        current_e1rm=stats.current_e1rm,
        previous_avg_e1rm=stats.previous_avg_e1rm,
        trend_percent=stats.trend_percent,
        status=stats.status,
        history=[HistoryPointRead(date=p.date, e1rm=p.e1rm) for p in stats.history],
        avg_rir=stats.avg_rir,
        avg_rpe=stats.avg_rpe,
    )


def _row_read(row: BucketRow, unit: Unit) -> BucketRowRead:
    return BucketRowRead(
        key=row.key,
        label=row.label,
        sessions=row.sessions,
        best_e1rm=format_weight(row.best_e1rm, unit, 0),
        avg_e1rm=format_weight(row.avg_e1rm, unit, 0),
        volume=format_weight(row.volume, unit, 0),
        avg_rir=row.avg_rir,
        avg_rpe=row.avg_rpe,
        session_ids=row.session_ids,
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get("/stats", response_model=list[ExerciseStatsRead])
def list_exercise_stats(
    user: UserDep, session: SessionDep, unit: Literal["kg", "lb"] | None = None
):
    display_unit = _resolve_unit(unit, user)
    results = calculate_all_exercise_stats(
        load_exercises(user.id, session), load_sessions(user.id, session), display_unit
    )
    return [_stats_read(s, display_unit) for s in results]


@router.get("/exercises/{exercise_id}/stats", response_model=ExerciseStatsRead)
def get_exercise_stats(
    exercise_id: int,
    user: UserDep,
    session: SessionDep,
    unit: Literal["kg", "lb"] | None = None,
):
    exercise = load_exercise(exercise_id, user.id, session)
    if exercise is None:
        raise HTTPException(status_code=404, detail="Exercise not found")
    display_unit = _resolve_unit(unit, user)
    stats = calculate_exercise_stats(exercise, load_sessions(user.id, session), display_unit)
    return _stats_read(stats, display_unit)


@router.get("/exercises/{exercise_id}/buckets", response_model=BucketReportRead)
def get_exercise_buckets(
    exercise_id: int,
    user: UserDep,
    session: SessionDep,
    timeframe: Timeframe = "week",
    unit: Literal["kg", "lb"] | None = None,
):
    exercise = load_exercise(exercise_id, user.id, session)
    if exercise is None:
        raise HTTPException(status_code=404, detail="Exercise not found")
    display_unit = _resolve_unit(unit, user)
    report = build_bucket_report(exercise, load_sessions(user.id, session), timeframe)
    totals = report.totals
    return BucketReportRead(
        exercise_id=exercise.id,
        timeframe=report.timeframe,
        unit=display_unit,
        rows=[_row_read(r, display_unit) for r in report.rows],
        totals=BucketTotalsRead(
            best_e1rm=format_weight(totals.best_e1rm, display_unit, 0),
            avg_e1rm=format_weight(totals.avg_e1rm, display_unit, 0),
            volume=format_weight(totals.volume, display_unit, 0),
            avg_rir=totals.avg_rir,
            avg_rpe=totals.avg_rpe,
        ),
    )
