"""
STORMRANK Command Line Interface (CLI)
======================================

Run the whole pipeline on a storm export and print the rankings:

    python -m stormrank.cli --csv "repdata_data_StormData.csv.bz2"

Optional exports write the same tables to CSV files or a JSON file, for the
charting/report step. The CLI never modifies the input file.
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from .config import DEFAULT_PERCENTILE, DEFAULT_START_YEAR, DEFAULT_TOP_N, PipelineConfig
from .engine import ImpactTables, StormRank
from .errors import StormRankError
from .loader import read_storm_csv

TITLES = {
    "health": "Health impact (fatalities + injuries)",
    "injuries": "Injuries",
    "fatalities": "Fatalities",
    "economic": "Economic impact (property + crop damage, US$)",
    "property": "Property damage (US$)",
    "crop": "Crop damage (US$)",
}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="stormrank",
        description="Rank U.S. weather event types by health and economic impact",
    )
    ap.add_argument("--csv", required=True, help="Path to the compressed NOAA storm export")
    ap.add_argument("--start-year", type=int, default=DEFAULT_START_YEAR,
                    help="Drop events that began before this year (default: %(default)s)")
    ap.add_argument("--percentile", type=float, default=DEFAULT_PERCENTILE,
                    help="Labels above this percentile of impact get reconciled (default: %(default)s)")
    ap.add_argument("--top", type=int, default=DEFAULT_TOP_N, help="Rows per table (default: %(default)s)")
    ap.add_argument("--export-json", metavar="PATH", help="Write all tables to one JSON file")
    ap.add_argument("--export-csv", metavar="DIR", help="Write one CSV per table into DIR")
    ap.add_argument("--audit", action="store_true", help="Print row counts after each stage")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log stage progress")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the STORMRANK CLI.

    1) Parse arguments into a PipelineConfig
    2) Load and clean the export
    3) Print (and optionally export) the six rankings
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        config = PipelineConfig(start_year=args.start_year, percentile=args.percentile, top_n=args.top)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        engine = StormRank(config=config)
        print("Loading dataset...")
        frame = read_storm_csv(args.csv, encoding=config.encoding)
        engine.prepare(frame)
        tables = engine.tables()
    except StormRankError as e:
        print(f"Error [{e.code}] {e.stage}: {e}", file=sys.stderr)
        print(f"Hint: {e.hint}", file=sys.stderr)
        return 1

    if args.audit:
        print("Rows after each stage:")
        for stage, n in engine.stage_counts.items():
            print(f"  {stage:<16} {n:>10,}")

    _print_tables(tables)

    try:
        if args.export_json:
            tables.export_json(args.export_json)
            print(f"Exported JSON to {args.export_json}")
        if args.export_csv:
            paths = tables.export_csv(args.export_csv)
            print(f"Exported {len(paths)} CSV files to {args.export_csv}")
    except OSError as e:
        print(f"Error [E-EXPORT-001] export: {e}", file=sys.stderr)
        print("Hint: Check that the export path is writable and its parent directory exists.", file=sys.stderr)
        return 1
    return 0


def _print_tables(tables: ImpactTables) -> None:
    for name, rows in tables.as_dict().items():
        print(f"\n{TITLES[name]}:")
        for rank, (label, total) in enumerate(rows, start=1):
            print(f"{rank:>3}. {label:<30} {total:>20,.0f}")


if __name__ == "__main__":
    sys.exit(main())
