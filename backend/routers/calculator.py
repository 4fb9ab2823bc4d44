from typing import Literal

from fastapi import APIRouter, Query
from sqlmodel import SQLModel

from backend.services.calculator import quick_estimate

router = APIRouter()


class QuickEstimateRead(SQLModel):
    unit: str
    e1rm: float
    normalized_rir: float | None
    normalized_rpe: float | None
    max_reps: int
    reps_at_rir: int


@router.get("/e1rm", response_model=QuickEstimateRead)
def estimate_e1rm(
    weight: float = Query(ge=0),
    reps: int = Query(ge=0),
    unit: Literal["kg", "lb"] = "kg",
    rir: int | None = None,
    rpe: float | None = None,
):
    """Quick estimator; out-of-range RIR/RPE are clamped rather than rejected."""
    result = quick_estimate(weight, reps, unit=unit, rir=rir, rpe=rpe)
    return QuickEstimateRead(
        unit=result.unit,
        e1rm=result.e1rm,
        normalized_rir=result.normalized_rir,
        normalized_rpe=result.normalized_rpe,
        max_reps=result.max_reps,
        reps_at_rir=result.reps_at_rir,
    )
