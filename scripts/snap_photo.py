"""Capture one photo from a local camera and track it for expiry."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from tempsnap.capture import CaptureSession
from tempsnap.config import load_settings
from tempsnap.context import build_context
from tempsnap.enums import LensFacing


def build_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Capture one photo that is deleted after the retention period."
    )
    parser.add_argument(
        "--lens",
        choices=[lens.value for lens in LensFacing],
        default=None,
        help="Camera to use (default: last used lens).",
    )
    parser.add_argument(
        "--retention-days",
        type=int,
        default=None,
        help="Update the retention period before capturing.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the script and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    context = build_context(load_settings())
    if args.retention_days is not None:
        try:
            context.policy.set_retention_days(args.retention_days)
        except ValueError as exc:
            print(f"Invalid retention: {exc}", file=sys.stderr)
            return 2
    if args.lens is not None:
        context.policy.set_last_lens_facing(LensFacing(args.lens))

    session = CaptureSession(
        context.capture_pipeline(), context.store, context.policy, context.namer
    )
    session.bind()
    if session.handle is None:
        print(f"Camera capture error: {session.lens.value} camera is unavailable", file=sys.stderr)
        return 2
    try:
        record_id = session.take_photo()
    finally:
        session.pause()
    if record_id is None:
        print("Camera capture error: no photo was written", file=sys.stderr)
        return 2

    record = context.store.get(record_id)
    print(f"Saved photo: {record.locator} (expires {record.expires_at.isoformat()})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
