"""Logging setup shared by the TUI and the web UI."""

from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None, filename: Path | None = None) -> None:
    """Configure root logging once; ``$LASTFAST_LOG_LEVEL`` wins over *level*.

    The TUI passes *filename* so log lines never draw over the screen.
    """
    name = (os.environ.get("LASTFAST_LOG_LEVEL") or level or "INFO").upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        numeric = logging.INFO
    if filename is not None:
        filename.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(level=numeric, format=LOG_FORMAT, filename=str(filename))
    else:
        logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger("lastfast").setLevel(numeric)
