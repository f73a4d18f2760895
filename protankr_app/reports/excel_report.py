"""
Excel report generation for load plans.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill

from ..services.validation import ValidationSeverity, fill_pct

if TYPE_CHECKING:
    from ..models import PlanInputs, PlanResult
    from ..services.validation import ValidationResult


def _fmt(value: object, fmt: str) -> str:
    """Safely format numeric values, falling back to string/blank."""
    if value is None:
        return ""
    try:
        return format(float(value), fmt)
    except (TypeError, ValueError):
        return str(value)


def _style_header(ws) -> None:
    header_fill = PatternFill(fill_type="solid", fgColor="4472C4")
    header_font = Font(bold=True, color="FFFFFF")
    header_alignment = Alignment(horizontal="center", vertical="center")
    for cell in ws[1]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = header_alignment


def _style_body_table(ws, *, start_row: int = 2, first_col_bold: bool = True, stripe: bool = True) -> None:
    """Zebra striping, bold first column, left-aligned wrapped first column."""
    stripe_fill = PatternFill(fill_type="solid", fgColor="F5F5F5")
    for row in ws.iter_rows(min_row=start_row, max_row=ws.max_row, min_col=1, max_col=ws.max_column):
        if first_col_bold and row and row[0].value not in (None, ""):
            row[0].font = Font(bold=True)
        for cell in row:
            if stripe and cell.row % 2 == 0:
                if cell.fill is None or cell.fill.fill_type is None:
                    cell.fill = stripe_fill
            if cell.column == 1:
                cell.alignment = Alignment(horizontal="left", vertical="center", wrap_text=True)


def _summary_frame(inputs: "PlanInputs", result: "PlanResult") -> pd.DataFrame:
    equipment = inputs.equipment
    return pd.DataFrame(
        {
            "Parameter": [
                "Equipment",
                "Trailer capacity (gal)",
                "Product temp (°F)",
                "CG slider",
                "CG bias",
                "Allowed payload (lbs)",
                "Planned weight (lbs)",
                "Margin (lbs)",
                "Planned gallons",
                "Max gallons by weight",
            ],
            "Value": [
                (equipment.name or equipment.combo_id) if equipment is not None else "",
                _fmt(equipment.trailer_capacity_gallons if equipment is not None else None, ".0f"),
                _fmt(inputs.temp_f, ".1f"),
                _fmt(inputs.cg_slider, ".2f"),
                _fmt(result.bias, "+.3f") + (" (unstable)" if result.unstable else ""),
                _fmt(result.payload_limit_lbs, ".0f"),
                _fmt(result.total_lbs, ".0f"),
                _fmt(result.margin_lbs, ".0f"),
                _fmt(result.total_gallons, ".0f"),
                _fmt(result.feasible_gallons, ".0f"),
            ],
        }
    )


def _compartments_frame(result: "PlanResult") -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Compartment": r.comp_number,
                "Product": r.product_id,
                "Max (gal)": round(r.max_gallons, 1),
                "Effective max (gal)": round(r.effective_max_gallons, 1),
                "Planned (gal)": round(r.planned_gallons, 1),
                "Fill (%)": round(fill_pct(r.planned_gallons, r.max_gallons), 1),
                "lbs/gal": round(r.lbs_per_gal, 4),
                "Planned (lbs)": round(r.planned_lbs, 1),
                "Position": r.position,
            }
            for r in result.rows
        ]
    )


def export_plan_to_excel(
    filepath: Path,
    inputs: "PlanInputs",
    result: "PlanResult",
    validation: "ValidationResult | None" = None,
) -> None:
    """
    Write a multi-sheet Excel workbook for a load plan:
    - Plan summary
    - Per-compartment rows
    - Checks with severity highlighting (when validation is given)
    """
    df_summary = _summary_frame(inputs, result)
    df_rows = _compartments_frame(result)
    df_checks = None
    if validation is not None and validation.issues:
        df_checks = pd.DataFrame(
            [
                {
                    "Code": i.code,
                    "Severity": i.severity.name,
                    "Value": _fmt(i.value, ".3f"),
                    "Limit": _fmt(i.limit, ".3f"),
                    "Message": i.message,
                }
                for i in validation.issues
            ]
        )

    with pd.ExcelWriter(str(filepath), engine="openpyxl") as writer:
        df_summary.to_excel(writer, sheet_name="Plan Summary", index=False)
        ws_summary = writer.sheets["Plan Summary"]
        ws_summary.column_dimensions["A"].width = 28
        ws_summary.column_dimensions["B"].width = 32
        _style_header(ws_summary)
        _style_body_table(ws_summary, start_row=2, first_col_bold=True, stripe=True)
        ws_summary.freeze_panes = "A2"

        if not df_rows.empty:
            df_rows.to_excel(writer, sheet_name="Compartments", index=False)
            ws_rows = writer.sheets["Compartments"]
            for col, width in zip("ABCDEFGHI", (13, 14, 11, 18, 14, 9, 10, 14, 10)):
                ws_rows.column_dimensions[col].width = width
            _style_header(ws_rows)
            _style_body_table(ws_rows, start_row=2, first_col_bold=True, stripe=True)
            ws_rows.freeze_panes = "A2"

        if df_checks is not None:
            df_checks.to_excel(writer, sheet_name="Checks", index=False)
            ws_checks = writer.sheets["Checks"]
            for col, width in zip("ABCDE", (16, 10, 12, 12, 70)):
                ws_checks.column_dimensions[col].width = width
            _style_header(ws_checks)
            _style_body_table(ws_checks, start_row=2, first_col_bold=False, stripe=True)
            ws_checks.freeze_panes = "A2"

            severity_col_idx = list(df_checks.columns).index("Severity") + 1
            for row_idx in range(2, ws_checks.max_row + 1):
                cell = ws_checks.cell(row=row_idx, column=severity_col_idx)
                value = str(cell.value or "").upper()
                if value == ValidationSeverity.ERROR.name:
                    cell.fill = PatternFill(fill_type="solid", fgColor="FFC7CE")
                elif value == ValidationSeverity.WARNING.name:
                    cell.fill = PatternFill(fill_type="solid", fgColor="FFEB9C")
                cell.alignment = Alignment(horizontal="center", vertical="center")
