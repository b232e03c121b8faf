"""
CLI interface for XER earned-value analysis.

Provides command-line access to parse a Primavera P6 XER file, print its
KPIs and EV curve, export results, and inspect the raw tables.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from schemas.validator import SchemaValidationError
from xer_evm.config.settings import settings
from xer_evm.models import ParseFailure
from xer_evm.parsers import XERFileError, XERParser
from xer_evm.pipeline import ProjectAnalysis, analyze_model, attach_summary
from xer_evm.utils.logger import configure_logging

PARSE_ERROR_MESSAGE = "Could not parse file"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the package (console, plus a file when LOG_DIR is set)."""
    configure_logging("xer_evm", level=logging.DEBUG if verbose else None)


def print_report(analysis: ProjectAnalysis) -> None:
    """Print a plain-text KPI report."""
    project = analysis.model.project
    kpis = analysis.kpis
    progress = analysis.activity_summary

    print(f"\n=== {project.name} ({project.id or 'no id'}) ===")
    print(f"Status:         {project.status}")
    print(f"Start / Finish: {project.start_date or 'N/A'} / {project.end_date or 'N/A'}")
    print(f"Manager:        {project.manager}")
    print(f"Activities:     {progress.total} "
          f"({progress.completed} complete, {progress.in_progress} in progress, "
          f"{progress.not_started} not started)")
    print(f"Resources:      {analysis.model.resource_count}")

    print("\n--- Earned Value ---")
    print(f"PV:   {kpis.total_planned_value:,.2f}")
    print(f"EV:   {kpis.total_earned_value:,.2f}")
    print(f"AC:   {kpis.total_actual_cost:,.2f}")
    print(f"SPI:  {kpis.schedule_performance_index:.4f}")
    print(f"CPI:  {kpis.cost_performance_index:.4f}")
    print(f"SV:   {kpis.schedule_variance:,.2f}")
    print(f"CV:   {kpis.cost_variance:,.2f}")
    print(f"EAC:  {kpis.estimate_at_completion:,.2f}")
    print(f"VAC:  {kpis.variance_at_completion:,.2f}")
    print(f"% complete: {kpis.percent_complete:.2f}")
    print(f"Health: {kpis.health} (grade: {analysis.health_grade.status})")

    if analysis.time_series:
        print("\n--- Cumulative EV by month ---")
        print(analysis.time_series_frame().to_string(index=False))

    if analysis.executive_summary:
        print("\n--- Executive Summary ---")
        print(analysis.executive_summary)


def run_analyze(
    input_file: Path,
    output_json: Path | None = None,
    csv_dir: Path | None = None,
    summary: bool = False,
    model: str | None = None,
) -> int:
    """
    Analyze one XER file.

    Args:
        input_file: Path to the XER file
        output_json: Write the JSON payload here instead of printing a report
        csv_dir: Also export activities, resources and time series CSVs
        summary: Request a narrative summary from Gemini
        model: Gemini model name (default: settings.GEMINI_MODEL)

    Returns:
        Process exit code
    """
    logger = logging.getLogger(__name__)

    parser = XERParser.from_file(input_file)
    result = parser.parse()
    if isinstance(result, ParseFailure):
        print(f"ERROR: {PARSE_ERROR_MESSAGE}: {input_file}", file=sys.stderr)
        return 1

    analysis = analyze_model(result)

    if summary:
        missing = settings.validate_required_settings(with_summary=True)
        if missing:
            logger.warning(f"Missing settings for summary: {missing}")
        else:
            from xer_evm.clients.gemini_client import generate_project_summary, summary_text

            analysis = attach_summary(
                analysis,
                lambda m, k: summary_text(generate_project_summary(m, k, model=model)),
            )

    if csv_dir:
        for path in analysis.export_csv(csv_dir):
            logger.info(f"Exported {path}")

    if output_json:
        output_json.parent.mkdir(parents=True, exist_ok=True)
        with open(output_json, "w", encoding="utf-8") as f:
            json.dump(analysis.to_dict(), f, indent=2)
        logger.info(f"Saved analysis to {output_json}")
    else:
        print_report(analysis)

    return 0


def run_tables(input_file: Path, export_dir: Path | None = None) -> int:
    """
    List the tables of an XER file, optionally exporting each one to CSV.

    Returns:
        Process exit code
    """
    parser = XERParser.from_file(input_file)
    if isinstance(parser.parse(), ParseFailure):
        print(f"ERROR: {PARSE_ERROR_MESSAGE}: {input_file}", file=sys.stderr)
        return 1

    info = parser.summary()
    print(f"=== {info['source']}: {info['total_tables']} tables ===")
    for name, table in info['tables'].items():
        print(f"  {name:<20} {table['rows']:>8,} rows  {table['columns']:>4} columns")

    if export_dir:
        written = parser.export_all_to_csv(export_dir)
        print(f"\nExported {len(written)} tables to {export_dir}")

    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="xer-evm",
        description="Earned-value analysis of Primavera P6 XER files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print KPIs and the monthly EV curve
  xer-evm analyze data/raw/project.xer

  # Write the JSON payload and CSV exports
  xer-evm analyze data/raw/project.xer --output out/project.json --csv-dir out/

  # Add a Gemini executive summary
  xer-evm analyze data/raw/project.xer --summary

  # List raw tables and export them
  xer-evm tables data/raw/project.xer --export-dir out/tables
""",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser("analyze", help="Compute KPIs and the EV time series")
    analyze_parser.add_argument("input_file", type=Path, help="Input XER file")
    analyze_parser.add_argument(
        "--output",
        type=Path,
        dest="output_json",
        help="Write the analysis as JSON to this path",
    )
    analyze_parser.add_argument(
        "--csv-dir",
        type=Path,
        dest="csv_dir",
        help="Export activities.csv, resources.csv and time_series.csv here",
    )
    analyze_parser.add_argument(
        "--summary",
        action="store_true",
        help="Generate a narrative executive summary with Gemini",
    )
    analyze_parser.add_argument(
        "--model",
        type=str,
        default=None,
        help=f"Gemini model name (default: {settings.GEMINI_MODEL})",
    )

    tables_parser = subparsers.add_parser("tables", help="List the raw tables of an XER file")
    tables_parser.add_argument("input_file", type=Path, help="Input XER file")
    tables_parser.add_argument(
        "--export-dir",
        type=Path,
        dest="export_dir",
        help="Export every table to <name>.csv in this directory",
    )

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        if args.command == "analyze":
            return run_analyze(
                args.input_file,
                output_json=args.output_json,
                csv_dir=args.csv_dir,
                summary=args.summary,
                model=args.model,
            )
        return run_tables(args.input_file, export_dir=args.export_dir)
    except (XERFileError, SchemaValidationError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
