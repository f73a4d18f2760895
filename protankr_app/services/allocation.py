"""
Capped proportional ("water-fill") allocation of a gallon total across compartments.

Each compartment receives a share of the remaining gallons proportional to its
weight among the compartments that still have room. Compartments that hit their
capacity drop out and the leftover is redistributed over the rest.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence

from ..config.limits import (
    CAPACITY_EPS,
    CG_BIAS_MIN,
    MIN_SHAPE,
    PLOW_BIAS_MAX,
    TILT_GAIN,
    WATER_FILL_MAX_ITER,
)
from ..models import ActiveCompartment, PlanRow


@dataclass(slots=True)
class AllocationSlot:
    """Allocator input: capacity (gal) and shaping weight."""
    capacity: float
    weight: float


def _finite_non_negative(value: float) -> float:
    return value if math.isfinite(value) and value > 0 else 0.0


def max_iterations(n: int) -> int:
    """At least 2 passes per compartment, never fewer than the default bound."""
    return max(WATER_FILL_MAX_ITER, 2 * n)


def allocate_with_caps(total_gallons: float, slots: Sequence[AllocationSlot]) -> List[float]:
    """
    Distribute total_gallons across slots proportionally to weight, never
    exceeding any slot's capacity. Returns planned gallons in input order.
    """
    total = _finite_non_negative(total_gallons)
    caps = [_finite_non_negative(s.capacity) for s in slots]
    weights = [_finite_non_negative(s.weight) for s in slots]
    planned = [0.0] * len(slots)

    remaining = total
    active = [i for i, cap in enumerate(caps) if cap > 0]

    for _ in range(max_iterations(len(slots))):
        if remaining <= CAPACITY_EPS or not active:
            break

        denom = sum(weights[i] for i in active)
        if not denom > 0:
            break

        k = remaining / denom
        for i in active:
            want = k * weights[i]
            room = caps[i] - planned[i]
            planned[i] += max(0.0, min(room, want))

        remaining = max(0.0, total - sum(planned))

        next_active = [i for i in active if planned[i] < caps[i] - CAPACITY_EPS]
        any_capped = len(next_active) != len(active)
        active = next_active
        if not any_capped:
            break

    return planned


def clamp_bias(bias: float) -> float:
    try:
        b = float(bias)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(b):
        return 0.0
    return max(CG_BIAS_MIN, min(PLOW_BIAS_MAX, b))


def shape_weight(capacity: float, position: float, bias: float) -> float:
    """Capacity scaled by the bias tilt for this position, floored at MIN_SHAPE."""
    raw = 1.0 + bias * position * TILT_GAIN
    shape = max(MIN_SHAPE, raw) if math.isfinite(raw) else MIN_SHAPE
    return shape * capacity


def plan_for_gallons(
    total_gallons: float,
    comps: Sequence[ActiveCompartment],
    bias: float,
) -> List[PlanRow]:
    """Allocate total_gallons over comps with the given bias; rows sorted by comp_number."""
    b = clamp_bias(bias)
    slots = [
        AllocationSlot(capacity=c.max_gallons, weight=shape_weight(c.max_gallons, c.position, b))
        for c in comps
    ]
    planned = allocate_with_caps(total_gallons, slots)

    rows = [
        PlanRow(
            comp_number=c.comp_number,
            max_gallons=c.true_max_gallons or c.max_gallons,
            planned_gallons=gal,
            product_id=c.product_id,
            lbs_per_gal=c.lbs_per_gal,
            position=c.position,
            effective_max_gallons=c.max_gallons,
        )
        for c, gal in zip(comps, planned)
    ]
    rows.sort(key=lambda r: r.comp_number)
    return rows
