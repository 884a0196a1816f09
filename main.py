"""
MediaBudget - Main Entry Point.

SOV/SOM budget planner for developing and emerging markets.
Derives a brand's next-year media budget and exports a PDF report.

Usage:
    python main.py [--brand NAME] [--current-som PCT] ... [--output-dir <dir>]
    python main.py --inputs-file plan.json [--output-dir <dir>]
    python main.py --batch brands.csv [--output-dir <dir>] [--excel]

Example:
    python main.py --brand Acme --current-som 10 --next-som 12 \\
        --leader-som 15 --comp-grp 1000 --comp-grp-increase 10 \\
        --cprp 500 --tv-factor 1.2
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

from mediabudget import __version__
from mediabudget.audit import AuditLogger
from mediabudget.calculator import BudgetEngine
from mediabudget.excel_generator import ExcelReporter
from mediabudget.formatting import format_fixed, format_grouped
from mediabudget.logging_config import configure_logging
from mediabudget.pdf_generator import PdfReporter
from mediabudget.schema import NOT_SPECIFIED, BudgetPlan
from mediabudget.validator import InputValidator, ValidationResult

logger = logging.getLogger("mediabudget.cli")

# CLI option -> BudgetInputs field
FIELD_OPTIONS = {
    "brand": "brand",
    "current_year": "current_year",
    "current_som": "current_som",
    "next_som": "next_som",
    "leader_name": "leader_name",
    "leader_som": "leader_som",
    "brand_grp": "brand_grp",
    "comp_grp": "comp_grp",
    "comp_grp_increase": "comp_grp_increase",
    "cprp": "cprp",
    "tv_factor": "tv_to_all_media_factor",
}


def print_header() -> None:
    """Prints the application header."""
    print("=" * 60)
    print("  Developing & Emerging Markets Budget Calculator")
    print(f"  Version: {__version__}")
    print("  SOV to SOM Ratio-based budget planning tool")
    print("=" * 60)
    print()


def print_summary(plan: BudgetPlan) -> None:
    """
    Prints a plan summary to the console.

    Args:
        plan: Budget plan with results.
    """
    inputs = plan.inputs
    ny = inputs.next_year

    print("  " + (inputs.brand.strip() or NOT_SPECIFIED).upper())
    print("  " + "-" * 40)
    print(f"  SOM Growth:          {format_fixed(plan.growth)}%")
    print(f"  Market Type:         {plan.market_type.value}")
    print(f"  Selected Ratio:      {format_fixed(plan.ratio)}")
    print(f"  Expected SOV {ny}:   {format_fixed(plan.expected_sov)}%")
    print(f"  Brand GRP {ny}:      {format_fixed(plan.next_year_brand_grp)}")
    print(f"  Competitor GRP {ny}: {format_fixed(plan.next_comp_grp)}")
    print(f"  Total Market GRP:    {format_fixed(plan.total_market_grp)}")
    print(f"  TV Budget {ny}:      {format_grouped(plan.next_year_tv_budget)}")
    print(f"  Total Budget {ny}:   {format_grouped(plan.total_budget)}")
    print()


def print_validation_errors(result: ValidationResult) -> None:
    """
    Prints validation errors, capped at the first 10.

    Args:
        result: Validation result with errors.
    """
    print(f"\n  ❌ VALIDATION ERRORS ({result.error_count} errors):")
    for error in result.errors[:10]:
        print(f"     {error}")
    if result.error_count > 10:
        print(f"     ... and {result.error_count - 10} more errors")


def collect_form_values(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Gathers input field values from an inputs file and CLI options.

    Options given on the command line override values from the file.

    Args:
        args: Parsed arguments.

    Returns:
        Mapping of BudgetInputs field name to raw value.

    Raises:
        FileNotFoundError: If the inputs file does not exist.
        ValueError: If the inputs file is not a JSON object.
    """
    values: Dict[str, Any] = {}

    if args.inputs_file is not None:
        if not args.inputs_file.exists():
            raise FileNotFoundError(f"Inputs file not found: {args.inputs_file}")
        try:
            data = json.loads(args.inputs_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Inputs file is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("Inputs file must contain a JSON object")
        # Audit snapshots nest the fields under "inputs"
        values.update(data.get("inputs", data))

    for option, field_name in FIELD_OPTIONS.items():
        value = getattr(args, option)
        if value is not None:
            values[field_name] = value

    return values


def run_planner(args: argparse.Namespace) -> int:
    """
    Runs the complete planning pipeline.

    Args:
        args: Parsed arguments.

    Returns:
        Exit code (0 for success, 1 for errors).
    """
    print_header()

    # Step 1: Validate inputs
    validator = InputValidator()
    try:
        if args.batch is not None:
            print(f"  Loading: {args.batch}")
            result = validator.validate_csv(args.batch)
        else:
            result = validator.validate_form(collect_form_values(args))
    except FileNotFoundError as e:
        print(f"\n  ❌ ERROR: {e}")
        return 1
    except ValueError as e:
        print(f"\n  ❌ ERROR: {e}")
        return 1

    if not result.is_valid:
        print_validation_errors(result)
        return 1

    if not result.plans_inputs:
        print("\n  ❌ ERROR: No plans to calculate")
        return 1

    # Step 2: Calculate plans
    engine = BudgetEngine()
    plans: List[BudgetPlan] = [engine.build_plan(inputs) for inputs in result.plans_inputs]
    print(f"  ✓ Calculated {len(plans)} plan(s)")
    print()

    # Step 3: Write reports
    output_dir: Path = args.output_dir
    pdf_reporter = PdfReporter()
    audit_logger = AuditLogger()

    for plan in plans:
        print_summary(plan)

        pdf_path = pdf_reporter.generate_report(plan, output_dir)
        print(f"  ✓ PDF report saved: {pdf_path}")

        if args.audit:
            stem = Path(pdf_reporter.generate_filename(plan.inputs.brand)).stem
            audit_path = audit_logger.save_to_file(plan, output_dir / f"{stem}.json")
            print(f"  ✓ Audit snapshot saved: {audit_path}")
        print()

    if args.excel:
        excel_reporter = ExcelReporter()
        excel_path = output_dir / excel_reporter.generate_filename()
        excel_reporter.generate_report(plans, excel_path)
        print(f"  ✓ Excel workbook saved: {excel_path}")
        print()

    print("=" * 60)
    print("  Budget Planning Complete")
    print("=" * 60)

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Builds the command-line parser."""
    parser = argparse.ArgumentParser(
        description="SOV/SOM budget planner for developing & emerging markets"
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--inputs-file",
        type=Path,
        help="JSON file with input fields (or an audit snapshot)"
    )
    source.add_argument(
        "--batch",
        type=Path,
        help="CSV file with one brand plan per row"
    )

    fields = parser.add_argument_group("plan inputs")
    fields.add_argument("--brand", help="Brand name")
    fields.add_argument("--current-year", help="Current year (default: 2026)")
    fields.add_argument("--current-som", help="Current Share of Market (%%)")
    fields.add_argument("--next-som", help="Next year's Share of Market (%%)")
    fields.add_argument("--leader-name", help="Category leader's name")
    fields.add_argument("--leader-som", help="Category leader's Share of Market (%%)")
    fields.add_argument("--brand-grp", help="Current brand GRP")
    fields.add_argument("--comp-grp", help="Current competitor GRP")
    fields.add_argument("--comp-grp-increase", help="Competitor GRP increase (%%)")
    fields.add_argument("--cprp", help="TV cost per rating point")
    fields.add_argument(
        "--tv-factor",
        help="Multiplier from TV budget to total media budget (default: 1)"
    )

    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("output"),
        help="Output directory for reports (default: output/)"
    )
    parser.add_argument(
        "--excel",
        action="store_true",
        help="Also write an Excel workbook of all plans"
    )
    parser.add_argument(
        "--audit",
        action="store_true",
        help="Also write a JSON audit snapshot per plan"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)"
    )
    return parser


def main(argv: List[str] = None) -> int:
    """
    Main entry point.

    Args:
        argv: Argument list. Defaults to sys.argv[1:].

    Returns:
        Exit code.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    logger.debug("Arguments: %s", args)

    return run_planner(args)


if __name__ == "__main__":
    sys.exit(main())
