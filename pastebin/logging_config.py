"""Logging setup for the pastebin package."""

import logging
import sys

_CONFIGURED = False


def configure_logging(level: str = "INFO") -> None:
    """Configure the `pastebin` logger hierarchy once.

    Later calls only adjust the level.
    """
    global _CONFIGURED
    resolved = getattr(logging, level.upper(), logging.INFO)
    root_logger = logging.getLogger("pastebin")
    root_logger.setLevel(resolved)
    if _CONFIGURED:
        return
    _CONFIGURED = True

    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        root_logger.addHandler(handler)
