"""
Weight-constrained capacity search.

Binary search on the requested gallon total over [0, total effective capacity]
for the largest total whose allocation stays within the payload limit.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Sequence

from ..config.limits import SOLVER_ITERATIONS, WEIGHT_TOLERANCE_LBS
from ..models import ActiveCompartment, PlanRow
from .allocation import plan_for_gallons

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SolverResult:
    feasible_gallons: float = 0.0
    rows: List[PlanRow] = field(default_factory=list)


def rows_weight_lbs(rows: Sequence[PlanRow]) -> float:
    """Sum of planned lbs; non-finite rows contribute nothing."""
    return sum(r.planned_lbs for r in rows)


def total_capacity_gallons(comps: Sequence[ActiveCompartment]) -> float:
    return sum(c.max_gallons for c in comps if math.isfinite(c.max_gallons) and c.max_gallons > 0)


def solve_max_gallons(
    comps: Sequence[ActiveCompartment],
    payload_limit_lbs: float,
    bias: float,
) -> SolverResult:
    """Largest gallon total (and its rows) that keeps planned weight within the payload."""
    if not comps:
        return SolverResult()

    cap = total_capacity_gallons(comps)
    if not cap > 0:
        return SolverResult()

    if not math.isfinite(payload_limit_lbs) or payload_limit_lbs <= 0:
        return SolverResult(feasible_gallons=0.0, rows=plan_for_gallons(0.0, comps, bias))

    lo = 0.0
    hi = cap
    for _ in range(SOLVER_ITERATIONS):
        mid = (lo + hi) / 2.0
        lbs = rows_weight_lbs(plan_for_gallons(mid, comps, bias))
        if lbs <= payload_limit_lbs + WEIGHT_TOLERANCE_LBS:
            lo = mid
        else:
            hi = mid

    # Capacity-bound: the whole trailer fits under the payload
    if rows_weight_lbs(plan_for_gallons(cap, comps, bias)) <= payload_limit_lbs + WEIGHT_TOLERANCE_LBS:
        lo = cap

    rows = plan_for_gallons(lo, comps, bias)
    logger.debug(
        "Solved %d compartments: %.3f gal of %.3f capacity, %.3f lbs of %.3f allowed",
        len(comps), lo, cap, rows_weight_lbs(rows), payload_limit_lbs,
    )
    return SolverResult(feasible_gallons=lo, rows=rows)
