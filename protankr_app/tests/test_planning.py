"""Tests for the planning orchestrator: active set, sign convention, headspace, end-to-end plans."""

from __future__ import annotations

import math
import random

import pytest

from protankr_app.models import (
    Compartment,
    CompartmentAssignment,
    Equipment,
    ExclusionReason,
    PlanInputs,
    Product,
)
from protankr_app.services.density import lbs_per_gallon_at_temp
from protankr_app.services.planning_service import (
    PlannerConfig,
    build_active_compartments,
    clamp_headspace,
    compute_plan,
    effective_max_gallons,
    planning_position,
)
from protankr_app.services.validation import validate_plan

# Products with exactly 6.0 / 6.5 lbs/gal at 60°F
_API_6_0 = 141.5 / (6.0 / 8.345404) - 131.5
_API_6_5 = 141.5 / (6.5 / 8.345404) - 131.5


def _inputs(compartments, products, assignments, gross=80000.0, tare=50000.0, slider=0.5, **kw):
    return PlanInputs(
        equipment=Equipment(combo_id="X", gross_limit_lbs=gross, tare_lbs=tare, compartments=compartments),
        products={p.product_id: p for p in products},
        assignments={k: CompartmentAssignment(empty=False, product_id=v) for k, v in assignments.items()},
        cg_slider=slider,
        **kw,
    )


class TestHeadspace:
    def test_clamp(self):
        assert clamp_headspace(None) == 0.0
        assert clamp_headspace(-0.1) == 0.0
        assert clamp_headspace(0.5) == 0.3
        assert clamp_headspace(math.nan) == 0.0
        assert clamp_headspace(0.1) == 0.1

    def test_effective_max_is_floored(self):
        assert effective_max_gallons(1000.0, 0.0) == 1000.0
        assert effective_max_gallons(1000.0, 0.1) == 900.0
        assert effective_max_gallons(1000.0, 0.0333) == 966.0
        assert effective_max_gallons(1000.0, 0.9) == 700.0
        assert effective_max_gallons(math.nan, 0.1) == 0.0

    def test_headspace_derates_plan_not_catalog(self):
        comp = Compartment(comp_number=1, max_gallons=1000.0, position=0.0)
        product = Product(product_id="P", api_60=_API_6_0, alpha_per_f=0.0005)
        inputs = _inputs([comp], [product], {1: "P"}, headspace_pct={1: 0.1})
        res = compute_plan(inputs)
        row = res.rows[0]
        assert row.planned_gallons == pytest.approx(900.0)
        assert row.effective_max_gallons == 900.0
        assert row.max_gallons == 1000.0
        assert comp.max_gallons == 1000.0


class TestPositionConvention:
    def test_stored_rear_positive_is_flipped(self):
        assert planning_position(1.5) == -1.5
        assert planning_position(-2.0) == 2.0

    def test_stored_front_positive_kept(self):
        cfg = PlannerConfig(stored_position_positive_is_rear=False)
        assert planning_position(1.5, cfg) == 1.5

    def test_bad_positions_are_neutral(self):
        assert planning_position(None) == 0.0
        assert planning_position(math.inf) == 0.0

    def test_front_bias_loads_front_compartment(self):
        # Stored +rear: comp 1 (-1) is at the front, comp 2 (+1) at the rear
        comps = [
            Compartment(comp_number=1, max_gallons=1000.0, position=-1.0),
            Compartment(comp_number=2, max_gallons=1000.0, position=1.0),
        ]
        product = Product(product_id="P", api_60=_API_6_0, alpha_per_f=0.0005)
        inputs = _inputs(comps, [product], {1: "P", 2: "P"}, gross=56000.0, tare=50000.0, slider=1.0)

        res = compute_plan(inputs)
        by_comp = res.planned_gallons_by_comp
        assert by_comp[1] > by_comp[2]

        flipped = compute_plan(inputs, PlannerConfig(stored_position_positive_is_rear=False))
        assert flipped.planned_gallons_by_comp[2] > flipped.planned_gallons_by_comp[1]
        assert flipped.planned_gallons_by_comp[2] == pytest.approx(by_comp[1])

    def test_active_sorted_rear_to_front(self, sample_inputs):
        active, _ = build_active_compartments(sample_inputs)
        assert [c.comp_number for c in active] == [4, 3, 2, 1]
        assert [c.position for c in active] == [-1.5, -0.5, 0.5, 1.5]


class TestActiveSelection:
    def test_all_assigned(self, sample_inputs):
        active, excluded = build_active_compartments(sample_inputs)
        assert len(active) == 4
        assert excluded == []
        ulsd = next(c for c in active if c.comp_number == 1)
        assert ulsd.lbs_per_gal == pytest.approx(lbs_per_gallon_at_temp(35.0, 0.00046, 60.0))

    def test_exclusion_reasons(self, sample_equipment, sample_products):
        sample_equipment.compartments.append(Compartment(comp_number=5, max_gallons=500.0, active=False))
        sample_equipment.compartments.append(Compartment(comp_number=6, max_gallons=0.0))
        inputs = PlanInputs(
            equipment=sample_equipment,
            products=sample_products,
            assignments={
                1: CompartmentAssignment(empty=True, product_id="ULSD"),
                2: CompartmentAssignment(empty=False, product_id=""),
                3: CompartmentAssignment(empty=False, product_id="JETA"),
                4: CompartmentAssignment(empty=False, product_id="NOALPHA"),
                5: CompartmentAssignment(empty=False, product_id="ULSD"),
                6: CompartmentAssignment(empty=False, product_id="ULSD"),
            },
        )
        active, excluded = build_active_compartments(inputs)
        assert active == []
        reasons = {e.comp_number: e.reason for e in excluded}
        assert reasons == {
            1: ExclusionReason.EMPTY,
            2: ExclusionReason.NO_PRODUCT,
            3: ExclusionReason.UNKNOWN_PRODUCT,
            4: ExclusionReason.NO_DENSITY,
            5: ExclusionReason.INACTIVE,
            6: ExclusionReason.NO_CAPACITY,
        }

    def test_empty_wins_over_capacity(self, sample_equipment, sample_products):
        sample_equipment.compartments[1].max_gallons = 0.5
        inputs = PlanInputs(
            equipment=sample_equipment,
            products=sample_products,
            assignments={
                1: CompartmentAssignment(empty=False, product_id="ULSD"),
                2: CompartmentAssignment(empty=True, product_id="ULSD"),
            },
        )
        _, excluded = build_active_compartments(inputs)
        reasons = {e.comp_number: e.reason for e in excluded}
        assert reasons[2] == ExclusionReason.EMPTY

        issues = validate_plan(compute_plan(inputs)).issues
        assert not any("Compartment 2" in i.message for i in issues)

    def test_unassigned(self, sample_equipment, sample_products):
        inputs = PlanInputs(equipment=sample_equipment, products=sample_products)
        active, excluded = build_active_compartments(inputs)
        assert active == []
        assert all(e.reason == ExclusionReason.NOT_ASSIGNED for e in excluded)

    def test_no_equipment(self):
        active, excluded = build_active_compartments(PlanInputs())
        assert active == [] and excluded == []


class TestEndToEnd:
    def test_two_compartments_neutral(self):
        comps = [
            Compartment(comp_number=1, max_gallons=3000.0, position=-1.0),
            Compartment(comp_number=2, max_gallons=2500.0, position=1.0),
        ]
        product = Product(product_id="P", api_60=_API_6_0, alpha_per_f=0.0005)
        res = compute_plan(_inputs(comps, [product], {1: "P", 2: "P"}, gross=80000.0, tare=50000.0))

        assert res.payload_limit_lbs == 30000.0
        assert res.bias == 0.0
        assert res.total_lbs <= 30000.0 + 1e-6
        assert res.total_lbs == pytest.approx(30000.0, abs=0.1)
        assert res.total_gallons == pytest.approx(5000.0, abs=0.01)
        assert res.feasible_gallons == pytest.approx(5000.0, abs=0.01)
        rows = {r.comp_number: r for r in res.rows}
        assert rows[1].fill_ratio == pytest.approx(rows[2].fill_ratio, rel=1e-9)
        assert res.margin_lbs == pytest.approx(30000.0 - res.total_lbs)

    def test_two_compartments_no_payload(self):
        comps = [
            Compartment(comp_number=1, max_gallons=3000.0, position=-1.0),
            Compartment(comp_number=2, max_gallons=2500.0, position=1.0),
        ]
        product = Product(product_id="P", api_60=_API_6_0, alpha_per_f=0.0005)
        res = compute_plan(_inputs(comps, [product], {1: "P", 2: "P"}, gross=50000.0, tare=50000.0))
        assert res.payload_limit_lbs == 0.0
        assert [r.planned_gallons for r in res.rows] == [0.0, 0.0]
        assert res.total_lbs == 0.0

    def test_single_compartment_capacity_bound(self):
        comps = [Compartment(comp_number=1, max_gallons=1000.0, position=0.0)]
        product = Product(product_id="P", api_60=_API_6_5, alpha_per_f=0.0005)
        res = compute_plan(_inputs(comps, [product], {1: "P"}, gross=60000.0, tare=50000.0))
        assert res.feasible_gallons == 1000.0
        assert res.total_lbs == pytest.approx(6500.0)
        assert res.margin_lbs == pytest.approx(3500.0)

    def test_sample_trailer_is_weight_bound(self, sample_inputs):
        res = compute_plan(sample_inputs)
        assert res.payload_limit_lbs == 45500.0
        assert res.total_lbs <= 45500.0 + 1e-6
        assert res.margin_lbs < 1.0
        assert [r.comp_number for r in res.rows] == [1, 2, 3, 4]
        assert not res.unstable

    def test_rear_slider_is_flagged_unstable(self, sample_inputs):
        sample_inputs.cg_slider = 0.2
        res = compute_plan(sample_inputs)
        assert res.unstable
        assert res.bias < 0

    def test_recompute_is_pure(self, sample_inputs):
        a = compute_plan(sample_inputs)
        b = compute_plan(sample_inputs)
        assert [r.planned_gallons for r in a.rows] == [r.planned_gallons for r in b.rows]
        assert a.feasible_gallons == b.feasible_gallons


class TestInvariants:
    def test_random_trailers(self):
        rng = random.Random(20260213)
        for _ in range(60):
            n = rng.randint(1, 8)
            comps = [
                Compartment(
                    comp_number=i + 1,
                    max_gallons=rng.uniform(300.0, 4000.0),
                    position=rng.uniform(-2.0, 2.0),
                )
                for i in range(n)
            ]
            products = [
                Product(product_id="D", api_60=rng.uniform(30.0, 40.0), alpha_per_f=0.00046),
                Product(product_id="G", api_60=rng.uniform(55.0, 65.0), alpha_per_f=0.0006),
            ]
            assignments = {c.comp_number: rng.choice(["D", "G"]) for c in comps}
            headspace = {c.comp_number: rng.uniform(0.0, 0.3) for c in comps}
            inputs = _inputs(
                comps,
                products,
                assignments,
                gross=80000.0,
                tare=rng.uniform(30000.0, 85000.0),
                slider=rng.random(),
                headspace_pct=headspace,
                temp_f=rng.uniform(-10.0, 110.0),
            )
            res = compute_plan(inputs)
            assert res.total_lbs <= res.payload_limit_lbs + 1e-6
            for r in res.rows:
                assert -1e-6 <= r.planned_gallons <= r.effective_max_gallons + 1e-6
            if res.payload_limit_lbs == 0.0:
                assert res.total_gallons == 0.0
