from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from protankr_app.models.compartment import CompartmentAssignment
from protankr_app.models.equipment import Equipment
from protankr_app.models.product import Product


class ExclusionReason(Enum):
    INACTIVE = "inactive"
    NOT_ASSIGNED = "not_assigned"
    EMPTY = "empty"
    NO_PRODUCT = "no_product"
    UNKNOWN_PRODUCT = "unknown_product"
    NO_DENSITY = "no_density"
    NO_CAPACITY = "no_capacity"
    INVALID_NUMBER = "invalid_number"


@dataclass(slots=True)
class PlanInputs:
    """Everything the planner reads for one planning pass."""
    equipment: Equipment | None = None
    products: Dict[str, Product] = field(default_factory=dict)

    # Mapping: comp_number -> operator assignment
    assignments: Dict[int, CompartmentAssignment] = field(default_factory=dict)

    # Mapping: comp_number -> headspace fraction (0..0.3)
    headspace_pct: Dict[int, float] = field(default_factory=dict)

    temp_f: float = 60.0
    cg_slider: float = 0.5

    @property
    def payload_limit_lbs(self) -> float:
        if self.equipment is None:
            return 0.0
        return self.equipment.payload_limit_lbs


@dataclass(slots=True)
class ActiveCompartment:
    """Compartment eligible for planning, with planning-time values resolved."""
    comp_number: int
    max_gallons: float  # effective max after headspace
    position: float     # +front / -rear
    product_id: str
    lbs_per_gal: float
    true_max_gallons: float = 0.0


@dataclass(slots=True)
class PlanRow:
    comp_number: int
    max_gallons: float  # true max
    planned_gallons: float
    product_id: str
    lbs_per_gal: float
    position: float
    effective_max_gallons: float = 0.0

    @property
    def planned_lbs(self) -> float:
        lbs = self.planned_gallons * self.lbs_per_gal
        return lbs if math.isfinite(lbs) else 0.0

    @property
    def fill_ratio(self) -> float:
        """Planned gallons as a fraction of the true max (0 when max is 0)."""
        if self.max_gallons <= 0:
            return 0.0
        return self.planned_gallons / self.max_gallons


@dataclass(slots=True)
class ExcludedCompartment:
    comp_number: int
    reason: ExclusionReason
    product_id: str = ""


@dataclass(slots=True)
class PlanResult:
    """Output of one planning pass: rows ascending by comp_number plus aggregates."""
    rows: List[PlanRow] = field(default_factory=list)
    feasible_gallons: float = 0.0
    payload_limit_lbs: float = 0.0
    bias: float = 0.0
    unstable: bool = False
    excluded: List[ExcludedCompartment] = field(default_factory=list)

    @property
    def total_gallons(self) -> float:
        return sum(r.planned_gallons for r in self.rows)

    @property
    def total_lbs(self) -> float:
        return sum(r.planned_lbs for r in self.rows)

    @property
    def margin_lbs(self) -> float:
        """Payload limit minus planned weight; positive means headroom."""
        return self.payload_limit_lbs - self.total_lbs

    @property
    def planned_gallons_by_comp(self) -> Dict[int, float]:
        return {r.comp_number: r.planned_gallons for r in self.rows}
