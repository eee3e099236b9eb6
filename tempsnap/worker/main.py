"""Periodic cleanup worker."""

from __future__ import annotations

import logging

from tempsnap.config import load_settings
from tempsnap.context import build_context


LOGGER = logging.getLogger("tempsnap.worker")


def run() -> None:
    """Run the periodic cleanup loop forever."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    context = build_context(load_settings())
    LOGGER.info(
        "Tracking %s items; media root %s",
        context.store.count(),
        context.namer.folder,
    )
    context.scheduler.run_forever()


if __name__ == "__main__":
    run()
