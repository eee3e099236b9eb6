"""Run one cleanup sweep over expired captures."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from tempsnap.config import load_settings
from tempsnap.context import build_context
from tempsnap.service import run_cleanup


def build_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(description="Delete expired TempSnap captures once.")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log each untracked item.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the script and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    context = build_context(load_settings())
    report = run_cleanup(context.store, context.policy, context.deleter, context.notifier)
    print(
        f"Expired: {report.expired}, deleted: {report.deleted}, "
        f"untracked without deleting: {report.failed}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
