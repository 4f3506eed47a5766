"""Process-wide logging setup for the command line entry point."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Send ``teahaven.*`` records to stderr at *level*.

    Calling it again only adjusts the level.
    """
    root = logging.getLogger("teahaven")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not any(getattr(h, "_teahaven", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._teahaven = True  # type: ignore[attr-defined]
        root.addHandler(handler)
