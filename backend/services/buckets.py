"""Time-bucketed aggregation of one exercise's working sets.

Bucket keys are zero-padded (YYYY-MM-DD, YYYY-Www, YYYY-MM, YYYY) so plain
string comparison orders them chronologically. Unpadded keys break the row
order; keep the padding.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal

from backend.services.e1rm import calculate_e1rm, working_sets
from backend.services.snapshot import ExerciseRecord, SessionRecord, sets_for_exercise
from backend.services.units import round_half_up

Timeframe = Literal["day", "week", "month", "year"]

TIMEFRAMES: tuple[str, ...] = ("day", "week", "month", "year")


def iso_week(when: date) -> tuple[int, int]:
    """ISO 8601 (week-year, week): Monday start, the Thursday decides the year."""
    iso = when.isocalendar()
    return iso[0], iso[1]


def bucket_key(when: date | datetime, timeframe: Timeframe) -> str:
    if timeframe == "day":
        return f"{when.year:04d}-{when.month:02d}-{when.day:02d}"
    if timeframe == "month":
        return f"{when.year:04d}-{when.month:02d}"
    if timeframe == "year":
        return f"{when.year:04d}"
    if timeframe == "week":
        year, week = iso_week(when)
        return f"{year:04d}-W{week:02d}"
    raise ValueError(f"Unknown timeframe: {timeframe}")


def bucket_label(key: str, timeframe: Timeframe) -> str:
    """Human-readable rendering of a bucket key."""
    if timeframe == "week":
        year, week = key.split("-W")
        return f"Semana {week} {year}"
    return key


# ---------------------------------------------------------------------------
# Accumulation
# ---------------------------------------------------------------------------


@dataclass
class BucketAccumulator:
    e1rm_sum: float = 0.0
    e1rm_best: float = 0.0
    count: int = 0
    volume: float = 0.0
    rir_sum: float = 0.0
    rir_count: int = 0
    rpe_sum: float = 0.0
    rpe_count: int = 0
    session_ids: list[int] = field(default_factory=list)

    def add_session(self, session_id: int) -> None:
        if session_id not in self.session_ids:
            self.session_ids.append(session_id)

    def add_set(self, weight: float, reps: int, rir: float | None, rpe: float | None) -> None:
        e1rm = calculate_e1rm(weight, reps)
        self.e1rm_sum += e1rm
        self.e1rm_best = max(self.e1rm_best, e1rm)
        self.count += 1
        self.volume += weight * reps
        # RIR and RPE are counted independently of each other
        if rir is not None:
            self.rir_sum += rir
            self.rir_count += 1
        if rpe is not None:
            self.rpe_sum += rpe
            self.rpe_count += 1


@dataclass(frozen=True)
class BucketRow:
    key: str
    label: str
    sessions: int
    best_e1rm: float
    avg_e1rm: float
    volume: float
    avg_rir: float | None
    avg_rpe: float | None
    session_ids: list[int]


@dataclass(frozen=True)
class BucketTotals:
    best_e1rm: float = 0.0
    avg_e1rm: float = 0.0
    volume: float = 0.0
    avg_rir: float | None = None
    avg_rpe: float | None = None


@dataclass(frozen=True)
class BucketReport:
    timeframe: str
    rows: list[BucketRow]
    totals: BucketTotals


def _mean_or_none(total: float, count: int) -> float | None:
    if not count:
        return None
    return round_half_up(total / count, 1)


class BucketMap:
    """Ordered map from zero-padded bucket key to its accumulator.

    Sort contract: `rows()` orders by key descending using plain string
    comparison, i.e. most recent bucket first.
    """

    def __init__(self, timeframe: Timeframe):
        if timeframe not in TIMEFRAMES:
            raise ValueError(f"Unknown timeframe: {timeframe}")
        self.timeframe = timeframe
        self._buckets: dict[str, BucketAccumulator] = {}

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, key: object) -> bool:
        return key in self._buckets

    def bucket_for(self, when: date | datetime) -> BucketAccumulator:
        key = bucket_key(when, self.timeframe)
        if key not in self._buckets:
            self._buckets[key] = BucketAccumulator()
        return self._buckets[key]

    def keys(self) -> list[str]:
        return sorted(self._buckets, reverse=True)

    def rows(self) -> list[BucketRow]:
        rows = []
        for key in self.keys():
            b = self._buckets[key]
            rows.append(
                BucketRow(
                    key=key,
                    label=bucket_label(key, self.timeframe),
                    sessions=len(b.session_ids),
                    best_e1rm=b.e1rm_best,
                    avg_e1rm=b.e1rm_sum / b.count if b.count else 0.0,
                    volume=b.volume,
                    avg_rir=_mean_or_none(b.rir_sum, b.rir_count),
                    avg_rpe=_mean_or_none(b.rpe_sum, b.rpe_count),
                    session_ids=list(b.session_ids),
                )
            )
        return rows


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_bucket_rows(
    exercise: ExerciseRecord,
    sessions: list[SessionRecord],
    timeframe: Timeframe,
) -> list[BucketRow]:
    """Aggregate the exercise's working sets into one row per time bucket.

    A session that contains the exercise always registers in its bucket's
    session ids, even when none of its sets qualify.
    """
    buckets = BucketMap(timeframe)
    for record in sessions:
        sets = sets_for_exercise(record, exercise.id)
        if sets is None:
            continue
        bucket = buckets.bucket_for(record.date)
        for s in working_sets(sets):
            bucket.add_set(s.weight, s.reps, s.rir, s.rpe)
        bucket.add_session(record.id)
    return buckets.rows()


def bucket_totals(rows: list[BucketRow]) -> BucketTotals:
    """Totals across buckets. Averages weight every bucket equally."""
    if not rows:
        return BucketTotals()

    rir_values = [r.avg_rir for r in rows if r.avg_rir is not None]
    rpe_values = [r.avg_rpe for r in rows if r.avg_rpe is not None]
    return BucketTotals(
        best_e1rm=max(r.best_e1rm for r in rows),
        avg_e1rm=sum(r.avg_e1rm for r in rows) / len(rows),
        volume=sum(r.volume for r in rows),
        avg_rir=_mean_or_none(sum(rir_values), len(rir_values)),
        avg_rpe=_mean_or_none(sum(rpe_values), len(rpe_values)),
    )


def build_bucket_report(
    exercise: ExerciseRecord,
    sessions: list[SessionRecord],
    timeframe: Timeframe,
) -> BucketReport:
    rows = build_bucket_rows(exercise, sessions, timeframe)
    return BucketReport(timeframe=timeframe, rows=rows, totals=bucket_totals(rows))
