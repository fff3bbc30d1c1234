"""
Logging setup for the API process.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    # Re-running (e.g. reload in dev) should not stack duplicate handlers.
    if any(getattr(h, "_school_api", False) for h in root.handlers):
        root.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._school_api = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)
