"""
Simple text-based report builder for a load plan.
"""

from __future__ import annotations

from protankr_app.models import PlanInputs, PlanResult
from protankr_app.services.validation import ValidationResult, fill_pct


def build_plan_summary_text(
    inputs: PlanInputs,
    result: PlanResult,
    validation: ValidationResult | None = None,
    trace_timestamp: str = "",
) -> str:
    lines: list[str] = []
    equipment = inputs.equipment
    if equipment is not None:
        lines.append(f"Equipment: {equipment.name or equipment.combo_id}")
        lines.append(f"Trailer capacity: {equipment.trailer_capacity_gallons:,.0f} gal")
    else:
        lines.append("Equipment: (none selected)")
    lines.append(f"Product temp: {inputs.temp_f:.1f} °F")
    lines.append(f"CG bias: {result.bias:+.3f}" + ("  (UNSTABLE: rear of neutral)" if result.unstable else ""))
    lines.append("")

    lines.append(f"{'Comp':>4}  {'Product':<12} {'Max gal':>9} {'Planned':>9} {'Fill %':>7} {'lbs/gal':>8} {'lbs':>9}")
    for row in result.rows:
        lines.append(
            f"{row.comp_number:>4}  {row.product_id:<12} {row.max_gallons:>9.0f} "
            f"{row.planned_gallons:>9.0f} {fill_pct(row.planned_gallons, row.max_gallons):>7.1f} "
            f"{row.lbs_per_gal:>8.3f} {row.planned_lbs:>9.0f}"
        )
    lines.append("")

    lines.append(f"Allowed payload: {result.payload_limit_lbs:.0f} lbs")
    lines.append(f"Planned weight: {result.total_lbs:.0f} lbs")
    lines.append(f"Margin: {result.margin_lbs:.0f} lbs")
    lines.append(f"Planned gallons: {result.total_gallons:.0f} gal")
    lines.append(f"Max gallons by weight: {result.feasible_gallons:.0f} gal")

    if validation is not None and validation.issues:
        lines.append("")
        lines.append("Checks:")
        for issue in validation.issues:
            lines.append(f"  [{issue.severity.value.upper()}] {issue.code}: {issue.message}")
    if trace_timestamp:
        lines.append(f"Calculated: {trace_timestamp}")
    return "\n".join(lines)
