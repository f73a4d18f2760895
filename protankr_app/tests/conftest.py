"""Pytest configuration and fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure project root is on path when running tests
_project_root = Path(__file__).resolve().parents[2]
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from protankr_app.models import (
    ActiveCompartment,
    Compartment,
    CompartmentAssignment,
    Equipment,
    PlanInputs,
    Product,
)


@pytest.fixture
def sample_products():
    """Diesel and gasoline with catalog densities, plus one with no alpha."""
    return {
        "ULSD": Product(product_id="ULSD", name="Ultra Low Sulfur Diesel", api_60=35.0, alpha_per_f=0.00046),
        "UNL87": Product(product_id="UNL87", name="Unleaded 87", api_60=60.0, alpha_per_f=0.0006),
        "NOALPHA": Product(product_id="NOALPHA", name="Broken entry", api_60=40.0, alpha_per_f=None),
    }


@pytest.fixture
def sample_equipment():
    """Four-compartment trailer. Stored positions use +rear, so comp 1 is at the front."""
    return Equipment(
        combo_id="C-100",
        name="Tractor 12 / Trailer 7",
        gross_limit_lbs=80000.0,
        tare_lbs=34000.0,
        buffer_lbs=500.0,
        compartments=[
            Compartment(comp_number=1, max_gallons=3000.0, position=-1.5),
            Compartment(comp_number=2, max_gallons=2500.0, position=-0.5),
            Compartment(comp_number=3, max_gallons=2500.0, position=0.5),
            Compartment(comp_number=4, max_gallons=3000.0, position=1.5),
        ],
    )


@pytest.fixture
def sample_inputs(sample_equipment, sample_products):
    """Diesel in the end compartments, gasoline in the middle, neutral slider at 60°F."""
    return PlanInputs(
        equipment=sample_equipment,
        products=sample_products,
        assignments={
            1: CompartmentAssignment(empty=False, product_id="ULSD"),
            2: CompartmentAssignment(empty=False, product_id="UNL87"),
            3: CompartmentAssignment(empty=False, product_id="UNL87"),
            4: CompartmentAssignment(empty=False, product_id="ULSD"),
        },
        temp_f=60.0,
        cg_slider=0.5,
    )


@pytest.fixture
def two_comp_active():
    """Two compartments, planning positions already +front / -rear, 6.0 lbs/gal."""
    return [
        ActiveCompartment(comp_number=1, max_gallons=3000.0, position=1.0, product_id="P", lbs_per_gal=6.0),
        ActiveCompartment(comp_number=2, max_gallons=2500.0, position=-1.0, product_id="P", lbs_per_gal=6.0),
    ]
