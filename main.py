#!/usr/bin/env python3
"""
Trait Explorer — launch the web API.

Usage:
    python main.py                              # http://localhost:8000
    python main.py --port 9000                  # http://localhost:9000
    python main.py --data-dir public/json       # numbered 1.json .. N.json
    python main.py --combined public/json/combined.json
    python main.py --data-url https://example.org/json --count 500
    python main.py --policy sentinel            # NONE_SENTINEL when nothing matches
    python main.py --reload                     # auto-reload on code changes
"""

from __future__ import annotations

import argparse
import os
import sys
import webbrowser
from pathlib import Path


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Launch the Trait Explorer web API.",
    )
    parser.add_argument(
        "--host", default=os.getenv("APP_HOST", "127.0.0.1"),
        help="Bind address (default: 127.0.0.1 or APP_HOST env var)",
    )
    parser.add_argument(
        "--port", type=int, default=int(os.getenv("APP_PORT", "8000")),
        help="Port to listen on (default: 8000 or APP_PORT env var)",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--data-dir", type=Path, default=None,
        help="Directory with numbered record files (default: public/json or APP_DATA_DIR)",
    )
    source.add_argument(
        "--combined", type=Path, default=None,
        help="Pre-joined JSON array file (see join_records.py)",
    )
    source.add_argument(
        "--data-url", default=None,
        help="Base URL serving numbered record files",
    )
    parser.add_argument(
        "--count", type=int, default=None,
        help="Number of numbered records to load (default: 1600 or APP_RECORD_COUNT)",
    )
    parser.add_argument(
        "--policy", choices=["empty", "sentinel"], default=None,
        help="What to show when nothing is selected or nothing matches",
    )
    parser.add_argument(
        "--reload", action="store_true",
        help="Enable auto-reload on file changes (development mode)",
    )
    parser.add_argument(
        "--no-browser", action="store_true",
        help="Don't open a browser window automatically",
    )
    args = parser.parse_args()

    # CLI flags become env vars so the app factory (and --reload workers) see them
    if args.data_dir is not None:
        os.environ["APP_DATA_DIR"] = str(args.data_dir)
    if args.combined is not None:
        os.environ["APP_COMBINED_FILE"] = str(args.combined)
    if args.data_url is not None:
        os.environ["APP_DATA_URL"] = args.data_url
    if args.count is not None:
        os.environ["APP_RECORD_COUNT"] = str(args.count)
    if args.policy is not None:
        os.environ["APP_NO_RESULTS_POLICY"] = args.policy

    if args.combined is not None and not args.combined.exists():
        print(f"Warning: Combined file not found at {args.combined}")
        print("  Run 'python join_records.py' first to build it.")
        print()

    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn is not installed.")
        print("  pip install uvicorn[standard]")
        sys.exit(1)

    url = f"http://{'localhost' if args.host == '0.0.0.0' else args.host}:{args.port}"
    print(f"Starting Trait Explorer at {url}")
    print()

    if not args.no_browser:
        # Open the API docs after a short delay to let the server start
        import threading
        threading.Timer(1.5, webbrowser.open, args=(f"{url}/docs",)).start()

    uvicorn.run(
        "api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
