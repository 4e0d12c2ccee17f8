"""Replay a scripted Coup match from a JSON or YAML config."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from coup.ops.cli import execute_config, format_result


def main() -> None:
    """Run the CLI entrypoint."""
    parser = argparse.ArgumentParser(description="Replay a scripted Coup match.")
    parser.add_argument("--config", required=True, type=Path, help="Path to config file.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate the config without playing it.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every action and turn transition.",
    )
    args = parser.parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.INFO)
    result = execute_config(args.config, dry_run=args.dry_run)
    if result is None:
        print(f"Config OK: {args.config}")
        return
    print(format_result(result))


if __name__ == "__main__":
    main()
