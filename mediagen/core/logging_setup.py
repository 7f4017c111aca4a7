"""Central logging setup for the server."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: str | int = logging.INFO) -> None:
    """
    Configure root logger with a single stdout handler.

    Args:
        level: Logging level, either numeric or a name such as ``"debug"``.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(resolve_level(level))
