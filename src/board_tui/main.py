#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import logging
import sys

from .app import BoardApp
from .config import load_config, setup_logging

logger = logging.getLogger("board")


# --- Entrypoint ---
def main() -> None:
    parser = argparse.ArgumentParser(description="Discussion board TUI client")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--theme", type=str, help="Set theme for this run")
    parser.add_argument("--board", type=str, help="Board to open first, by name")
    parser.add_argument(
        "--interval",
        type=float,
        help="Seconds between automatic refreshes of the open board",
    )
    args = parser.parse_args()

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    if args.interval is not None and args.interval <= 0:
        parser.error("--interval must be positive")

    config = load_config()
    theme_name = args.theme or config.get("theme") or "dracula"
    logger.info("Using theme: %s", theme_name)

    try:
        app = BoardApp(
            theme=theme_name,
            config=config,
            initial_board=args.board,
            tick_interval=args.interval,
        )
        app.run()
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        print(f"Application crashed: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
