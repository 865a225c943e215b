"""
Record Join CLI for the Trait Explorer

Concatenates numbered per-record JSON files (1.json … N.json) into a single
JSON array that the explorer can load in one read.

Usage:
    # Join public/json/1.json .. 1600.json into public/json/combined.json
    python join_records.py

    # Custom directory, count and output file
    python join_records.py --json-dir data/items --count 500 --output data/all.json

    # Show every skipped index
    python join_records.py --verbose
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from engine.errors import LoadFailure
from pipeline.join import join_record_files
from utils.common import elapsed
from utils.config import DEFAULT_RECORD_COUNT


def main():
    """Parse arguments and run the join."""
    parser = argparse.ArgumentParser(
        description="Join numbered record JSON files into one JSON array"
    )
    parser.add_argument(
        "--json-dir", type=Path, default=Path("public/json"),
        help="Directory holding 1.json .. N.json (default: public/json)"
    )
    parser.add_argument(
        "--count", type=int, default=DEFAULT_RECORD_COUNT, metavar="N",
        help=f"Highest record index to read (default: {DEFAULT_RECORD_COUNT})"
    )
    parser.add_argument(
        "--output", type=Path, default=None,
        help="Output file (default: <json-dir>/combined.json)"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log every missing index (default: summary only)"
    )

    args = parser.parse_args()

    if args.count < 1:
        print("ERROR: --count must be at least 1")
        sys.exit(1)
    if not args.json_dir.is_dir():
        print(f"ERROR: Directory not found: {args.json_dir}")
        sys.exit(1)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.ERROR,
        format="%(asctime)s  %(levelname)-7s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )

    start = time.time()
    try:
        result = join_record_files(args.json_dir, count=args.count, output=args.output)
    except LoadFailure as e:
        print(f"ERROR: {e.resource}: {e}")
        sys.exit(1)

    print(f"Combined {result.records_written:,} records into {result.output_path}")
    print(f"  {result.report.console_summary()}  [{elapsed(start)}]")
    missing = result.report.skipped_items()
    if missing and not args.verbose:
        preview = ", ".join(missing[:10])
        more = f" ... and {len(missing) - 10} more" if len(missing) > 10 else ""
        print(f"  Missing indices: {preview}{more}")


if __name__ == "__main__":
    main()
