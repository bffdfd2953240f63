"""Logging configuration for ado.

Console handler on stderr for startup and the printed listing; an
optional file handler for everything. While curses owns the terminal
the console handlers are detached, see console_suspended().
"""
from __future__ import annotations

import contextlib
import logging
import sys
from pathlib import Path
from typing import Iterator, List, Optional

FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int = logging.INFO, log_file: Optional[Path] = None) -> None:
    """Configure the root logger. Call once, before the first log call."""
    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=FORMAT, datefmt=DATEFMT)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(max(level, logging.WARNING))
    ch.setFormatter(fmt)
    root.addHandler(ch)

    if log_file is not None:
        log_file = Path(log_file)
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(str(log_file), encoding="utf-8")
        except OSError as exc:
            root.warning("Log file %s unavailable: %s", log_file, exc)
        else:
            fh.setLevel(level)
            fh.setFormatter(fmt)
            root.addHandler(fh)

    logging.captureWarnings(True)


def _console_handlers(root: logging.Logger) -> List[logging.Handler]:
    return [h for h in root.handlers
            if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)]


@contextlib.contextmanager
def console_suspended() -> Iterator[None]:
    """Detach stderr handlers for the duration (the screen belongs to curses)."""
    root = logging.getLogger()
    detached = _console_handlers(root)
    for h in detached:
        root.removeHandler(h)
    try:
        yield
    finally:
        for h in detached:
            root.addHandler(h)
