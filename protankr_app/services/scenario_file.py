"""
File service for loading planning scenarios and saving computed plans.

A scenario is a JSON document holding the equipment (with its compartments),
the terminal's products, per-compartment assignments, headspace overrides,
product temperature and CG slider position.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from protankr_app.models import (
    Compartment,
    CompartmentAssignment,
    Equipment,
    PlanInputs,
    PlanResult,
    Product,
)
from protankr_app.services.traceability import create_snapshot


@dataclass(slots=True)
class ScenarioFileError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


def _opt_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _float(value: Any, default: float) -> float:
    v = _opt_float(value)
    return default if v is None or not math.isfinite(v) else v


_TRUE_STRINGS = {"true", "yes", "y", "1", "on"}
_FALSE_STRINGS = {"false", "no", "n", "0", "off"}


def _bool(value: Any, default: bool) -> bool:
    """JSON flag: real booleans, 0/1, or the usual yes/no strings; anything else → default."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return default


def _dict_str_keys_to_int(
raw: Dict[str, Any] | None) -> Dict[int, Any]:
    """Normalize dict from JSON (string keys) to int keys; bad keys are dropped."""
    if not isinstance(raw, dict):
        return {}
    out: Dict[int, Any] = {}
    for k, v in raw.items():
        try:
            out[int(k)] = v
        except (TypeError, ValueError):
            continue
    return out


def _parse_compartments(raw: Any) -> List[Compartment]:
    comps: List[Compartment] = []
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, dict):
            continue
        try:
            comp_number = int(item["comp_number"])
        except (KeyError, TypeError, ValueError):
            continue
        comps.append(
            Compartment(
                comp_number=comp_number,
                max_gallons=_float(item.get("max_gallons"), 0.0),
                position=_float(item.get("position"), 0.0),
                active=_bool(item.get("active"), True),
            )
        )
    return comps


def _parse_equipment(raw: Any) -> Equipment | None:
    if not isinstance(raw, dict):
        return None
    return Equipment(
        combo_id=str(raw.get("combo_id", "") or ""),
        name=str(raw.get("name", "") or ""),
        gross_limit_lbs=_opt_float(raw.get("gross_limit_lbs")),
        tare_lbs=_opt_float(raw.get("tare_lbs")),
        buffer_lbs=_opt_float(raw.get("buffer_lbs")) or 0.0,
        compartments=_parse_compartments(raw.get("compartments")),
    )


def _parse_products(raw: Any) -> Dict[str, Product]:
    products: Dict[str, Product] = {}
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, dict) or not item.get("product_id"):
            continue
        product = Product(
            product_id=str(item["product_id"]),
            name=str(item.get("name", "") or ""),
            api_60=_opt_float(item.get("api_60")),
            alpha_per_f=_opt_float(item.get("alpha_per_f")),
            last_api=_opt_float(item.get("last_api")),
            last_temp_f=_opt_float(item.get("last_temp_f")),
        )
        products[product.product_id] = product
    return products


def _parse_assignments(raw: Any) -> Dict[int, CompartmentAssignment]:
    out: Dict[int, CompartmentAssignment] = {}
    for comp_number, sel in _dict_str_keys_to_int(raw).items():
        if isinstance(sel, str):
            # Shorthand: "3": "ULSD"
            out[comp_number] = CompartmentAssignment(empty=not sel, product_id=sel)
        elif isinstance(sel, dict):
            product_id = str(sel.get("product_id", "") or "")
            out[comp_number] = CompartmentAssignment(
                empty=_bool(sel.get("empty"), not product_id),
                product_id=product_id,
            )
    return out


def scenario_from_dict(data: Dict[str, Any]) -> PlanInputs:
    """Build PlanInputs from a decoded scenario document. Malformed entries are skipped."""
    headspace = {
        k: v for k, v in
        ((k, _opt_float(v)) for k, v in _dict_str_keys_to_int(data.get("headspace_pct")).items())
        if v is not None
    }
    return PlanInputs(
        equipment=_parse_equipment(data.get("equipment")),
        products=_parse_products(data.get("products")),
        assignments=_parse_assignments(data.get("assignments")),
        headspace_pct=headspace,
        temp_f=_float(data.get("temp_f"), 60.0),
        cg_slider=_float(data.get("cg_slider"), 0.5),
    )


def load_scenario_from_file(filepath: Path) -> PlanInputs:
    """
    Load a planning scenario from a JSON file.

    Raises ScenarioFileError when the file cannot be read or is not a JSON object.
    """
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise ScenarioFileError(f"Cannot read scenario file {filepath}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ScenarioFileError(f"Scenario file {filepath} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ScenarioFileError(f"Scenario file {filepath} must contain a JSON object.")
    return scenario_from_dict(data)


def save_plan_to_file(filepath: Path, inputs: PlanInputs, result: PlanResult) -> None:
    """
    Save a computed plan (snapshot with inputs, totals and load lines) to JSON.

    Args:
        filepath: Path where to save the file
        inputs: The inputs the plan was computed from
        result: The computed plan
    """
    data = create_snapshot(inputs, result).to_dict()
    data["rows"] = [
        {
            "comp_number": r.comp_number,
            "max_gallons": r.max_gallons,
            "effective_max_gallons": r.effective_max_gallons,
            "planned_gallons": r.planned_gallons,
            "product_id": r.product_id,
            "lbs_per_gal": r.lbs_per_gal,
            "planned_lbs": r.planned_lbs,
        }
        for r in result.rows
    ]
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
