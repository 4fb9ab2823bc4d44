from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from backend.services.e1rm import session_max_e1rm
from backend.services.snapshot import SessionRecord, sets_for_exercise
from backend.services.units import Unit, format_weight, round_half_up

TrendStatus = Literal["improving", "maintaining", "declining", "new"]

# Current session is compared against the mean of this many previous sessions.
BASELINE_WINDOW = 2

IMPROVING_THRESHOLD = 2.0
DECLINING_THRESHOLD = -2.0

SHORT_MONTHS_ES = (
    "ene", "feb", "mar", "abr", "may", "jun",
    "jul", "ago", "sept", "oct", "nov", "dic",
)


@dataclass(frozen=True)
class SessionPoint:
    session_id: int
    date: datetime
    e1rm: float  # kg


@dataclass(frozen=True)
class HistoryPoint:
    date: str
    e1rm: int


@dataclass(frozen=True)
class TrendResult:
    status: TrendStatus
    current: float = 0.0
    baseline: float = 0.0
    trend_percent: float = 0.0
    points: list[SessionPoint] = field(default_factory=list)


def session_points(exercise_id: int, sessions: list[SessionRecord]) -> list[SessionPoint]:
    """One (date, best e1RM) point per session with a qualifying set, newest first."""
    points = []
    for record in sessions:
        sets = sets_for_exercise(record, exercise_id)
        if sets is None:
            continue
        best = session_max_e1rm(sets)
        if best > 0:
            points.append(SessionPoint(session_id=record.id, date=record.date, e1rm=best))
    # sorted() is stable, ties keep their input order
    return sorted(points, key=lambda p: p.date, reverse=True)


def trend_percent(current: float, baseline: float) -> float:
    if baseline <= 0:
        return 0.0
    return round_half_up((current - baseline) / baseline * 100, 1)


def trend_status(percent: float) -> TrendStatus:
    if percent >= IMPROVING_THRESHOLD:
        return "improving"
    if percent <= DECLINING_THRESHOLD:
        return "declining"
    return "maintaining"


def classify_trend(points: list[SessionPoint]) -> TrendResult:
    """Label the trajectory of newest-first session points.

    With no points the exercise is "new". Otherwise the newest point is
    compared with the mean of the next BASELINE_WINDOW points (or with itself
    when there is no earlier session).
    """
    if not points:
        return TrendResult(status="new")

    current = points[0].e1rm
    previous = points[1 : 1 + BASELINE_WINDOW]
    baseline = sum(p.e1rm for p in previous) / len(previous) if previous else current

    percent = trend_percent(current, baseline)
    return TrendResult(
        status=trend_status(percent),
        current=current,
        baseline=baseline,
        trend_percent=percent,
        points=points,
    )


def short_date_label(when: datetime) -> str:
    """'15 ene' style label for chart axes."""
    return f"{when.day} {SHORT_MONTHS_ES[when.month - 1]}"


def history_series(points: list[SessionPoint], unit: Unit) -> list[HistoryPoint]:
    """Chart series, oldest first, e1RM in the display unit as integers."""
    return [
        HistoryPoint(date=short_date_label(p.date), e1rm=int(format_weight(p.e1rm, unit, 0)))
        for p in reversed(points)
    ]
