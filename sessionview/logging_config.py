"""sessionview logging configuration.

Library modules only create module loggers; handlers are installed once by the
entry points (CLI, API server) through ``setup_logging``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: Optional[str] = None, *, default: str = "INFO") -> None:
    """Configure sessionview logging.

    Args:
        level: Optional override for `SESSIONVIEW_LOG_LEVEL`.
        default: Level used when neither the override nor the env var is set.
    """
    if level:
        os.environ["SESSIONVIEW_LOG_LEVEL"] = level

    resolved = os.getenv("SESSIONVIEW_LOG_LEVEL", default).upper()
    root = logging.getLogger("sessionview")
    root.setLevel(getattr(logging, resolved, logging.INFO))

    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.propagate = False
