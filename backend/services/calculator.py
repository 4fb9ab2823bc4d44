from dataclasses import dataclass

from backend.services.e1rm import (
    calculate_e1rm,
    estimate_max_reps_at_weight,
    estimate_reps_from_rir,
    rir_from_rpe,
    rpe_from_rir,
)
from backend.services.units import Unit, format_weight, round_half_up, to_kg


@dataclass(frozen=True)
class QuickEstimate:
    unit: str
    e1rm: float
    normalized_rir: float | None
    normalized_rpe: float | None
    max_reps: int
    reps_at_rir: int


def quick_estimate(
    weight: float,
    reps: int,
    unit: Unit = "kg",
    rir: int | None = None,
    rpe: float | None = None,
) -> QuickEstimate:
    """Estimate e1RM and rep capacity from a single set typed in `unit`.

    RIR wins over RPE when both are given; the missing one is derived.
    """
    weight_kg = to_kg(weight, unit)
    e1rm = calculate_e1rm(weight_kg, reps) if reps > 0 else 0.0

    if rir is not None:
        rir = max(0, min(10, rir))
    if rpe is not None:
        rpe = max(1, min(10, rpe))

    if rir is not None:
        norm_rir: float | None = rir
    elif rpe is not None:
        norm_rir = rir_from_rpe(rpe)
    else:
        norm_rir = None

    if rpe is not None:
        norm_rpe: float | None = rpe
    elif rir is not None:
        norm_rpe = rpe_from_rir(rir)
    else:
        norm_rpe = None

    max_reps = estimate_max_reps_at_weight(weight_kg, e1rm) if e1rm > 0 and weight_kg > 0 else 0
    reps_at_rir = (
        estimate_reps_from_rir(weight_kg, e1rm, norm_rir) if norm_rir is not None else 0
    )

    return QuickEstimate(
        unit=unit,
        e1rm=format_weight(e1rm, unit, 0),
        normalized_rir=round_half_up(norm_rir, 1) if norm_rir is not None else None,
        normalized_rpe=round_half_up(norm_rpe, 1) if norm_rpe is not None else None,
        max_reps=max_reps,
        reps_at_rir=reps_at_rir,
    )
