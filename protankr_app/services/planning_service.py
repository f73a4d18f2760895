"""
Planning orchestrator.

Selects active compartments from the current inputs, resolves their densities,
runs the weight-constrained solver and returns the plan with its aggregates.
Pure function of its inputs: the caller re-runs it whenever anything changes.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Tuple

from ..config.limits import MAX_HEADSPACE_FRACTION, STORED_POSITION_POSITIVE_IS_REAR
from ..models import (
    ActiveCompartment,
    Compartment,
    ExcludedCompartment,
    ExclusionReason,
    PlanInputs,
    PlanResult,
)
from .bias import DEFAULT_CURVE, BiasCurve, bias_from_slider, is_unstable
from .density import product_lbs_per_gallon
from .solver import solve_max_gallons

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlannerConfig:
    """Per-deployment planning choices."""
    bias_curve: BiasCurve = field(default_factory=lambda: DEFAULT_CURVE)
    # True when the catalog stores +position = rear; planning uses +position = front
    stored_position_positive_is_rear: bool = STORED_POSITION_POSITIVE_IS_REAR


DEFAULT_CONFIG = PlannerConfig()


def clamp_headspace(pct: float | None) -> float:
    """Headspace fraction clamped to [0, MAX_HEADSPACE_FRACTION]; junk → 0."""
    if pct is None:
        return 0.0
    try:
        raw = float(pct)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(raw):
        return 0.0
    return max(0.0, min(MAX_HEADSPACE_FRACTION, raw))


def effective_max_gallons(true_max_gallons: float, headspace_pct: float | None) -> float:
    """True max derated by headspace, floored to whole gallons. Does not touch the catalog value."""
    if not math.isfinite(true_max_gallons):
        return 0.0
    eff = true_max_gallons * (1.0 - clamp_headspace(headspace_pct))
    return float(max(0, math.floor(eff)))


def planning_position(raw_position: float | None, config: PlannerConfig = DEFAULT_CONFIG) -> float:
    """Stored position converted to the planning convention (+front / -rear)."""
    if raw_position is None:
        return 0.0
    try:
        pos = float(raw_position)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(pos):
        return 0.0
    return -pos if config.stored_position_positive_is_rear else pos


def _exclusion_for(
    comp: Compartment,
    inputs: PlanInputs,
    max_gallons: float,
) -> Tuple[ExclusionReason | None, float | None]:
    if not comp.active:
        return ExclusionReason.INACTIVE, None

    sel = inputs.assignments.get(comp.comp_number)
    if sel is None:
        return ExclusionReason.NOT_ASSIGNED, None
    if sel.empty:
        return ExclusionReason.EMPTY, None
    if not sel.product_id:
        return ExclusionReason.NO_PRODUCT, None
    if max_gallons <= 0:
        return ExclusionReason.NO_CAPACITY, None

    product = inputs.products.get(sel.product_id)
    if product is None:
        return ExclusionReason.UNKNOWN_PRODUCT, None

    lbs_per_gal = product_lbs_per_gallon(product, inputs.temp_f)
    if lbs_per_gal is None:
        return ExclusionReason.NO_DENSITY, None
    return None, lbs_per_gal


def build_active_compartments(
    inputs: PlanInputs,
    config: PlannerConfig = DEFAULT_CONFIG,
) -> Tuple[List[ActiveCompartment], List[ExcludedCompartment]]:
    """
    Split the equipment's compartments into plannable ones and exclusions.

    Active compartments come back ordered rear → front by planning position.
    """
    active: List[ActiveCompartment] = []
    excluded: List[ExcludedCompartment] = []
    if inputs.equipment is None:
        return active, excluded

    for comp in inputs.equipment.compartments:
        sel = inputs.assignments.get(comp.comp_number)
        product_id = sel.product_id if sel is not None else ""

        try:
            comp_number = int(comp.comp_number)
            true_max = float(comp.max_gallons)
        except (TypeError, ValueError):
            excluded.append(ExcludedCompartment(comp.comp_number, ExclusionReason.INVALID_NUMBER, product_id))
            continue

        max_gallons = effective_max_gallons(true_max, inputs.headspace_pct.get(comp_number))
        reason, lbs_per_gal = _exclusion_for(comp, inputs, max_gallons)
        if reason is not None:
            excluded.append(ExcludedCompartment(comp_number, reason, product_id))
            continue

        active.append(
            ActiveCompartment(
                comp_number=comp_number,
                max_gallons=max_gallons,
                position=planning_position(comp.position, config),
                product_id=product_id,
                lbs_per_gal=lbs_per_gal,  # type: ignore[arg-type]
                true_max_gallons=true_max,
            )
        )

    active.sort(key=lambda c: c.position)
    return active, excluded


def compute_plan(inputs: PlanInputs, config: PlannerConfig | None = None) -> PlanResult:
    """Run one planning pass. Never raises for bad numbers; worst case is an all-zero plan."""
    cfg = config or DEFAULT_CONFIG
    active, excluded = build_active_compartments(inputs, cfg)
    bias = bias_from_slider(inputs.cg_slider, cfg.bias_curve)
    payload = inputs.payload_limit_lbs

    solved = solve_max_gallons(active, payload, bias)

    logger.debug(
        "Plan: %d active, %d excluded, bias %.3f, feasible %.1f gal",
        len(active), len(excluded), bias, solved.feasible_gallons,
    )
    return PlanResult(
        rows=solved.rows,
        feasible_gallons=solved.feasible_gallons,
        payload_limit_lbs=payload,
        bias=bias,
        unstable=is_unstable(inputs.cg_slider, cfg.bias_curve),
        excluded=excluded,
    )
