from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT_LOGGER = "rbxcss"

_FORMAT = "%(levelname)s: %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``rbxcss`` namespace."""
    if not name or name == ROOT_LOGGER:
        return logging.getLogger(ROOT_LOGGER)
    if name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(verbose: bool = False) -> None:
    """Attach a single stderr handler to the package logger (idempotent)."""
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    for handler in root.handlers:
        if getattr(handler, "_rbxcss_handler", False):
            # stderr may have been swapped since the handler was installed
            handler.setStream(sys.stderr)
            return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._rbxcss_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
