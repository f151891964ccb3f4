from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

from .config import parse_config_file
from .processing import run_pipeline


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agroclim",
        description="Hot days, heatwaves, frost dates and degree days from daily CIMIS or gridMET data.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to plain-text configuration file (key=value per line).",
    )
    parser.add_argument("--no-save", action="store_true", help="Skip writing CSV outputs.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output.")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = parse_config_file(args.config)
        results = run_pipeline(config, save_results=not args.no_save)
    except (FileNotFoundError, KeyError, ValueError) as e:
        logger.error(f"Error: {e}")
        return 1

    summary_lines = [f"Loaded {results['n_days']} days"]
    if results["start_date"] is not None:
        summary_lines[0] += f" ({results['start_date'].date()} to {results['end_date'].date()})"

    yearly = results["yearly_counts"]
    heat = results["heatwaves"]
    for year in yearly.index:
        line = f"{year}: {yearly.loc[year, 'hot_days']} hot days, {yearly.loc[year, 'frost_days']} frost days"
        if year in heat.index:
            line += f", {heat.loc[year, 'heatwaves']} heatwave(s), longest {heat.loc[year, 'longest']} days"
        summary_lines.append(line)

    targets = results.get("degree_day_targets")
    if targets is not None:
        for year, row in targets.iterrows():
            reached = row["date"].date() if not pd.isna(row["date"]) else "not reached"
            summary_lines.append(f"{year}: degree-day target {config.dd_target} -> {reached}")

    if results.get("output_dir"):
        summary_lines.append(f"Results saved to: {results['output_dir']}")

    print("\n".join(summary_lines))
    return 0


if __name__ == "__main__":
    sys.exit(main())
