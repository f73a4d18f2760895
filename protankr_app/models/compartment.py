from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Compartment:
    """
    One compartment of a trailer as stored in the equipment catalog.

    max_gallons is the true physical maximum. Headspace derating is a
    per-session planning input and never changes this value.
    position is the raw stored longitudinal value; its sign convention is
    resolved by the planner (see config.limits.STORED_POSITION_POSITIVE_IS_REAR).
    """
    comp_number: int = 0
    max_gallons: float = 0.0
    position: float = 0.0
    active: bool = True


@dataclass(slots=True)
class CompartmentAssignment:
    """Operator choice for a compartment: empty, or loaded with a product."""
    empty: bool = True
    product_id: str = ""  # "" means none selected

    @property
    def has_product(self) -> bool:
        return not self.empty and bool(self.product_id)
