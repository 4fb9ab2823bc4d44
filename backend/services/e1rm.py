"""Strength estimation primitives.

All weights are in kg. RIR/RPE mappings are the linear convention
RPE = 10 - RIR; they are approximations, not physiology.
"""

import math
from collections.abc import Iterable

from backend.services.snapshot import SetRecord


def calculate_e1rm(weight: float, reps: int) -> float:
    """Epley estimate of the one-rep max.

    Callers must pass reps >= 1 and weight > 0; reps == 0 is not checked and
    yields a meaningless value. Filter sets with `is_working_set` first.
    """
    if reps == 1:
        return weight
    return weight * (1 + reps / 30)


def estimate_max_reps_at_weight(weight: float, e1rm: float) -> int:
    """Inverse Epley: how many reps `weight` allows given an e1RM."""
    if weight <= 0 or e1rm <= 0:
        return 0
    reps = 30 * (e1rm / weight - 1)
    return max(0, math.floor(reps))


def rpe_from_rir(rir: float) -> float:
    return max(1, min(10, 10 - rir))


def rir_from_rpe(rpe: float) -> float:
    return max(0, min(10, 10 - rpe))


def estimate_rir_from_set(weight: float, reps: int, e1rm: float) -> int:
    return max(0, estimate_max_reps_at_weight(weight, e1rm) - reps)


def estimate_reps_from_rir(weight: float, e1rm: float, rir: float) -> int:
    return max(0, math.floor(estimate_max_reps_at_weight(weight, e1rm) - rir))


def is_working_set(s: SetRecord) -> bool:
    """Non-warm-up set with positive weight and reps."""
    return not s.is_warmup and s.weight > 0 and s.reps > 0


def working_sets(sets: Iterable[SetRecord]) -> list[SetRecord]:
    return [s for s in sets if is_working_set(s)]


def session_max_e1rm(sets: Iterable[SetRecord]) -> float:
    """Best e1RM among the working sets of one session/entry, 0 if none."""
    best = 0.0
    for s in working_sets(sets):
        best = max(best, calculate_e1rm(s.weight, s.reps))
    return best
