"""
Domain models for the protankr load planner.

These are pure Python/domain classes with no I/O.
"""

from protankr_app.models.compartment import Compartment, CompartmentAssignment
from protankr_app.models.product import Product
from protankr_app.models.equipment import Equipment
from protankr_app.models.plan import (
    ActiveCompartment,
    ExcludedCompartment,
    ExclusionReason,
    PlanInputs,
    PlanResult,
    PlanRow,
)

__all__ = [
    "Compartment",
    "CompartmentAssignment",
    "Product",
    "Equipment",
    "ActiveCompartment",
    "ExcludedCompartment",
    "ExclusionReason",
    "PlanInputs",
    "PlanResult",
    "PlanRow",
]
