"""
Command-line entry point for the protankr load planner.

Reads a JSON scenario, computes the plan, prints a summary and optionally
writes Excel / PDF / JSON outputs.
"""

import argparse
import logging
import sys
from pathlib import Path

from protankr_app.config.settings import Settings, init_logging
from protankr_app.reports import build_plan_summary_text, export_plan_to_excel, export_plan_to_pdf
from protankr_app.services.planning_service import compute_plan
from protankr_app.services.scenario_file import ScenarioFileError, load_scenario_from_file, save_plan_to_file
from protankr_app.services.validation import validate_plan

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protankr",
        description="Plan gallons per compartment within the payload limit and CG bias.",
    )
    parser.add_argument("scenario", type=Path, help="Scenario JSON (equipment, products, assignments)")
    parser.add_argument("--temp-f", type=float, default=None, help="Override product temperature (°F)")
    parser.add_argument("--slider", type=float, default=None, help="Override CG slider (0 rear .. 1 front)")
    parser.add_argument("--excel", type=Path, default=None, help="Write an Excel workbook here")
    parser.add_argument("--pdf", type=Path, default=None, help="Write a PDF load sheet here")
    parser.add_argument("--json", type=Path, default=None, help="Write the plan snapshot as JSON here")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to console")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Runs one planning pass; returns 0 ok, 1 bad scenario, 2 plan failed its checks."""
    args = _build_parser().parse_args(argv)

    settings = Settings.default()
    init_logging(settings, console=args.verbose, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        inputs = load_scenario_from_file(args.scenario)
    except ScenarioFileError as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.temp_f is not None:
        inputs.temp_f = args.temp_f
    if args.slider is not None:
        inputs.cg_slider = args.slider

    result = compute_plan(inputs)
    validation = validate_plan(result)
    logger.info(
        "Planned %.0f gal / %.0f lbs of %.0f lbs allowed from %s",
        result.total_gallons, result.total_lbs, result.payload_limit_lbs, args.scenario,
    )

    print(build_plan_summary_text(inputs, result, validation))

    if args.excel is not None:
        export_plan_to_excel(args.excel, inputs, result, validation)
        logger.info("Excel report written to %s", args.excel)
    if args.pdf is not None:
        export_plan_to_pdf(args.pdf, inputs, result, validation)
        logger.info("PDF report written to %s", args.pdf)
    if args.json is not None:
        save_plan_to_file(args.json, inputs, result)
        logger.info("Plan snapshot written to %s", args.json)

    return 2 if validation.has_errors else 0


if __name__ == "__main__":
    sys.exit(main())
