"""
CG slider → signed bias coefficient.

The slider runs 0 (full rear) .. 1 (full front). Three power-curve segments:
rear [0, neutral) → (-1, 0], front (neutral, front_cap] → (0, 1],
plow (front_cap, 1] → (1, plow_max]. Continuous at both breakpoints.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..config.limits import (
    CG_CURVE,
    CG_FRONT_MAX,
    CG_NEUTRAL,
    CG_REAR_MAX,
    PLOW_BIAS_MAX,
)


@dataclass(frozen=True, slots=True)
class BiasCurve:
    neutral: float = CG_NEUTRAL
    front_cap: float = CG_FRONT_MAX
    rear_max: float = CG_REAR_MAX
    plow_max: float = PLOW_BIAS_MAX
    exponent: float = CG_CURVE


DEFAULT_CURVE = BiasCurve()


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def clamp_slider(slider: float) -> float:
    """Clamp to [0, 1]; non-numeric or non-finite input maps to 0."""
    try:
        s = float(slider)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(s):
        return 0.0
    return _clamp01(s)


def bias_from_slider(slider: float, curve: BiasCurve = DEFAULT_CURVE) -> float:
    s = clamp_slider(slider)

    if s < curve.neutral:
        if curve.neutral <= curve.rear_max:
            return 0.0
        t =(curve.neutral - s) / (curve.neutral - curve.rear_max)
        return -math.pow(_clamp01(t), curve.exponent)

    if s <= curve.front_cap:
        if curve.front_cap <= curve.neutral:
            return 0.0
        t = (s - curve.neutral) / (curve.front_cap - curve.neutral)
        return math.pow(_clamp01(t), curve.exponent)

    t2 = (s - curve.front_cap) / (1.0 - curve.front_cap)
    return 1.0 + math.pow(_clamp01(t2), curve.exponent) * (curve.plow_max - 1.0)


def is_unstable(slider: float, curve: BiasCurve = DEFAULT_CURVE) -> bool:
    """Rear of neutral: the UI warns the operator the load is rear-biased."""
    return clamp_slider(slider) < curve.neutral
