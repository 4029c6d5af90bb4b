"""Process-wide logging configuration."""

import logging
import sys


def setup_logging(level: int = logging.INFO) -> None:
    """Configure the root logger with a single stderr handler.

    Call this once at startup, before the first log record is emitted.
    Any pre-existing root handlers are removed to avoid duplicate output.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(fmt)
    root.addHandler(handler)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
