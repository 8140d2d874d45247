# autoload/core/logging.py
import logging
import os
import sys

LOG_LEVEL_ENV = "LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False


def _configure_root() -> None:
    global _configured
    if _configured:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("autoload")
    root.addHandler(handler)
    root.setLevel(os.getenv(LOG_LEVEL_ENV, "INFO").upper())
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger under the "autoload" namespace.

    All loggers share one stderr handler, configured on first use.
    """
    _configure_root()
    if not name.startswith("autoload"):
        name = f"autoload.{name}"
    return logging.getLogger(name)
