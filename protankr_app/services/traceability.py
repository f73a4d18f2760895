"""
Plan traceability: inputs snapshot, outputs, timestamp, and the begin-load payload.

The payload is handed to whatever records the load; nothing here submits it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

from protankr_app.models import PlanInputs, PlanResult

PLAN_SNAPSHOT_VERSION = 1


def _finite_or_none(value: float | None) -> float | None:
    if value is None:
        return None
    try:
        v = float(value)
    except (TypeError, ValueError):
        return None
    return v if math.isfinite(v) else None


@dataclass(slots=True)
class PlanSnapshot:
    """Traceability snapshot for one planning pass."""
    timestamp: datetime
    combo_id: str
    inputs: Dict[str, Any] = field(default_factory=dict)
    outputs: Dict[str, Any] = field(default_factory=dict)
    lines: List[Dict[str, Any]] = field(default_factory=list)
    version: int = PLAN_SNAPSHOT_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "v": self.version,
            "created_at": self.timestamp.isoformat(),
            "combo_id": self.combo_id,
            "inputs": self.inputs,
            "totals": self.outputs,
            "lines": self.lines,
        }


def build_load_lines(result: PlanResult, temp_f: float | None) -> List[Dict[str, Any]]:
    """One line per compartment that actually gets product."""
    lines: List[Dict[str, Any]] = []
    for row in result.rows:
        if not row.product_id or not row.planned_gallons > 0:
            continue
        lines.append(
            {
                "comp_number": row.comp_number,
                "product_id": row.product_id,
                "planned_gallons": _finite_or_none(row.planned_gallons),
                "planned_lbs": _finite_or_none(row.planned_gallons * row.lbs_per_gal),
                "temp_f": _finite_or_none(temp_f),
            }
        )
    return lines


def planned_totals(inputs: PlanInputs, result: PlanResult) -> Dict[str, float | None]:
    """Totals block; gross is tare + buffer + planned product weight."""
    total_lbs = _finite_or_none(result.total_lbs)
    gross = None
    equipment = inputs.equipment
    if equipment is not None and total_lbs is not None:
        tare = _finite_or_none(equipment.tare_lbs)
        buffer = _finite_or_none(equipment.buffer_lbs if equipment.buffer_lbs is not None else 0.0)
        if tare is not None and buffer is not None:
            gross = tare + buffer + total_lbs
    return {
        "planned_total_gal": _finite_or_none(result.total_gallons),
        "planned_total_lbs": total_lbs,
        "planned_gross_lbs": gross,
    }


def create_snapshot(inputs: PlanInputs, result: PlanResult) -> PlanSnapshot:
    """Build a traceability snapshot from plan inputs and results."""
    equipment = inputs.equipment
    snapshot_inputs = {
        "temp_f": _finite_or_none(inputs.temp_f),
        "cg_slider": _finite_or_none(inputs.cg_slider),
        "cg_bias": _finite_or_none(result.bias),
        "payload_limit_lbs": result.payload_limit_lbs,
        "headspace_pct": {str(k): v for k, v in inputs.headspace_pct.items()},
        "assignments": {
            str(k): {"empty": a.empty, "product_id": a.product_id}
            for k, a in sorted(inputs.assignments.items())
        },
    }
    outputs = planned_totals(inputs, result)
    outputs["feasible_gal"] = _finite_or_none(result.feasible_gallons)
    outputs["margin_lbs"] = _finite_or_none(result.margin_lbs)

    return PlanSnapshot(
        timestamp=datetime.now(timezone.utc),
        combo_id=equipment.combo_id if equipment is not None else "",
        inputs=snapshot_inputs,
        outputs=outputs,
        lines=build_load_lines(result, inputs.temp_f),
    )


def build_begin_load_payload(
    inputs: PlanInputs,
    result: PlanResult,
    terminal_id: str = "",
) -> Dict[str, Any]:
    """Payload for the external begin-load call: combo, bias, temperature, totals, lines."""
    snapshot = create_snapshot(inputs, result)
    return {
        "combo_id": snapshot.combo_id,
        "terminal_id": terminal_id,
        "cg_bias": snapshot.inputs["cg_bias"],
        "product_temp_f": snapshot.inputs["temp_f"],
        "planned_totals": planned_totals(inputs, result),
        "planned_snapshot": snapshot.to_dict(),
        "lines": snapshot.lines,
    }
