from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List

from protankr_app.models.compartment import Compartment


def _finite_or_zero(value: float | None) -> float:
    if value is None:
        return 0.0
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0.0
    return v if math.isfinite(v) else 0.0


@dataclass(slots=True)
class Equipment:
    """Truck/trailer combination with its weight limits and compartments."""
    combo_id: str = ""
    name: str = ""
    gross_limit_lbs: float | None = None
    tare_lbs: float | None = None
    # Extra safety margin held back from the legal payload
    buffer_lbs: float | None = 0.0

    compartments: List[Compartment] = field(default_factory=list)

    @property
    def payload_limit_lbs(self) -> float:
        """Allowed product weight: gross - tare - buffer, never negative."""
        gross = _finite_or_zero(self.gross_limit_lbs)
        tare = _finite_or_zero(self.tare_lbs)
        buffer = _finite_or_zero(self.buffer_lbs)
        return max(0.0, gross - tare - buffer)

    @property
    def trailer_capacity_gallons(self) -> float:
        """Sum of true maxima of the catalog-active compartments."""
        return sum(
            _finite_or_zero(c.max_gallons) for c in self.compartments if c.active
        )
