"""
PDF load sheet for a planned load.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from reportlab.graphics.shapes import Drawing, Rect, String
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import (
    BaseDocTemplate,
    Frame,
    PageTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
)

from protankr_app.services.validation import ValidationSeverity, fill_pct

if TYPE_CHECKING:
    from protankr_app.models import PlanInputs, PlanResult
    from protankr_app.services.validation import ValidationResult

_HEADER_BG = colors.HexColor("#4472C4")
_STRIPE_BG = colors.HexColor("#F5F5F5")


def _fmt(value: object, fmt: str) -> str:
    """Safely format numeric values for PDF tables."""
    if value is None:
        return ""
    try:
        return format(float(value), fmt)
    except (TypeError, ValueError):
        return str(value)


def _section_title(text: str, styles) -> Paragraph:
    return Paragraph(f"<b>{text}</b>", styles["Heading3"])


def _table_style(n_rows: int) -> TableStyle:
    cmds = [
        ("BACKGROUND", (0, 0), (-1, 0), _HEADER_BG),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("GRID", (0, 0), (-1, -1), 0.4, colors.grey),
        ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]
    for r in range(2, n_rows, 2):
        cmds.append(("BACKGROUND", (0, r), (-1, r), _STRIPE_BG))
    return TableStyle(cmds)


def _build_fill_drawing(result: "PlanResult", width: float = 16 * cm, height: float = 4 * cm) -> Drawing:
    """Side view of the trailer: one bar per compartment, front on the left, filled to plan."""
    drawing = Drawing(width, height)
    rows = sorted(result.rows, key=lambda r: -r.position)
    if not rows:
        drawing.add(String(width / 2, height / 2, "No compartments planned", textAnchor="middle"))
        return drawing

    gap = 4.0
    label_h = 12.0
    slot_w = (width - gap * (len(rows) + 1)) / len(rows)
    bar_h = height - 2 * label_h
    for i, row in enumerate(rows):
        x = gap + i * (slot_w + gap)
        y = label_h
        drawing.add(Rect(x, y, slot_w, bar_h, strokeColor=colors.black, fillColor=colors.white))
        ratio = max(0.0, min(1.0, fill_pct(row.planned_gallons, row.max_gallons) / 100.0))
        if ratio > 0:
            drawing.add(Rect(x, y, slot_w, bar_h * ratio, strokeColor=None, fillColor=colors.HexColor("#9DC3E6")))
        drawing.add(String(x + slot_w / 2, 2, f"#{row.comp_number}", textAnchor="middle", fontSize=8))
        drawing.add(
            String(x + slot_w / 2, y + bar_h + 3, f"{row.planned_gallons:,.0f} gal", textAnchor="middle", fontSize=7)
        )
    return drawing


def export_plan_to_pdf(
    filepath: Path,
    inputs: "PlanInputs",
    result: "PlanResult",
    validation: "ValidationResult | None" = None,
) -> None:
    """
    Generate a one-page PDF load sheet:
    - Plan summary (payload, weight, margin, gallons)
    - Compartment table and fill diagram
    - Checks, when validation is given
    """
    doc = BaseDocTemplate(
        str(filepath),
        pagesize=A4,
        rightMargin=2.2 * cm,
        leftMargin=2.2 * cm,
        topMargin=2.0 * cm,
        bottomMargin=2.0 * cm,
    )
    doc.title = "Load Plan"
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "CustomTitle",
        parent=styles["Heading1"],
        fontSize=16,
        leading=20,
        spaceAfter=6,
    )
    styles["Heading3"].spaceBefore = 6
    styles["Heading3"].spaceAfter = 2

    def _draw_page_frame(canvas, _doc) -> None:
        width, height = canvas._pagesize
        margin = 0.7 * cm
        canvas.saveState()
        canvas.setStrokeColor(colors.HexColor("#000000"))
        canvas.setLineWidth(0.7)
        canvas.rect(margin, margin, width - 2 * margin, height - 2 * margin, stroke=1, fill=0)
        canvas.restoreState()

    frame = Frame(doc.leftMargin, doc.bottomMargin, doc.width, doc.height, id="portrait_frame")
    doc.addPageTemplates([PageTemplate(id="Portrait", frames=[frame], onPage=_draw_page_frame, pagesize=A4)])

    equipment = inputs.equipment
    story = []
    story.append(Paragraph("protankr - Load Plan", title_style))
    story.append(
        Paragraph(
            f"Equipment: {(equipment.name or equipment.combo_id) if equipment is not None else '(none)'}",
            styles["Normal"],
        )
    )
    story.append(Spacer(1, 0.4 * cm))

    story.append(_section_title("Plan Summary", styles))
    summary_rows = [
        ["Parameter", "Value"],
        ["Product temp (°F)", _fmt(inputs.temp_f, ".1f")],
        ["CG bias", _fmt(result.bias, "+.3f") + (" (unstable)" if result.unstable else "")],
        ["Allowed payload (lbs)", _fmt(result.payload_limit_lbs, ",.0f")],
        ["Planned weight (lbs)", _fmt(result.total_lbs, ",.0f")],
        ["Margin (lbs)", _fmt(result.margin_lbs, ",.0f")],
        ["Planned gallons", _fmt(result.total_gallons, ",.0f")],
        ["Max gallons by weight", _fmt(result.feasible_gallons, ",.0f")],
    ]
    summary_table = Table(summary_rows, colWidths=[7 * cm, 6 * cm])
    summary_table.setStyle(_table_style(len(summary_rows)))
    story.append(summary_table)
    story.append(Spacer(1, 0.4 * cm))

    story.append(_section_title("Compartments", styles))
    comp_rows = [["Comp", "Product", "Max gal", "Planned gal", "Fill %", "lbs/gal", "Planned lbs"]]
    for r in result.rows:
        comp_rows.append(
            [
                str(r.comp_number),
                r.product_id,
                _fmt(r.max_gallons, ",.0f"),
                _fmt(r.planned_gallons, ",.0f"),
                _fmt(fill_pct(r.planned_gallons, r.max_gallons), ".1f"),
                _fmt(r.lbs_per_gal, ".3f"),
                _fmt(r.planned_lbs, ",.0f"),
            ]
        )
    comp_table = Table(comp_rows, repeatRows=1)
    comp_table.setStyle(_table_style(len(comp_rows)))
    story.append(comp_table)
    story.append(Spacer(1, 0.3 * cm))
    story.append(_build_fill_drawing(result))

    if validation is not None and validation.issues:
        story.append(Spacer(1, 0.4 * cm))
        story.append(_section_title("Checks", styles))
        check_rows = [["Severity", "Code", "Message"]]
        for issue in validation.issues:
            check_rows.append([issue.severity.name, issue.code, Paragraph(issue.message, styles["BodyText"])])
        check_table = Table(check_rows, colWidths=[2.2 * cm, 3.3 * cm, 11 * cm], repeatRows=1)
        style = _table_style(len(check_rows))
        for idx, issue in enumerate(validation.issues, start=1):
            if issue.severity == ValidationSeverity.ERROR:
                style.add("BACKGROUND", (0, idx), (0, idx), colors.HexColor("#FFC7CE"))
            elif issue.severity == ValidationSeverity.WARNING:
                style.add("BACKGROUND", (0, idx), (0, idx), colors.HexColor("#FFEB9C"))
        style.add("ALIGN", (0, 1), (-1, -1), "LEFT")
        check_table.setStyle(style)
        story.append(check_table)

    doc.build(story)
