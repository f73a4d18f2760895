"""
Reporting utilities (text/PDF/Excel) for protankr load plans.
"""

from protankr_app.reports.simple_text_report import build_plan_summary_text
from protankr_app.reports.pdf_report import export_plan_to_pdf
from protankr_app.reports.excel_report import export_plan_to_excel

__all__ = [
    "build_plan_summary_text",
    "export_plan_to_pdf",
    "export_plan_to_excel",
]
