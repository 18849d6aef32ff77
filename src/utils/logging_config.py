"""
Logging Configuration

Process-wide logging setup shared by the CLI and the host entry points.
Entry points call setup_logging() on every invocation; only the first call
configures anything.
"""

import logging
import sys
import threading
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_lock = threading.Lock()
_handler: Optional[logging.Handler] = None


def _log_uncaught_exception(exc_type, exc_value, exc_traceback, previous_hook=sys.excepthook):
    if not issubclass(exc_type, KeyboardInterrupt):
        logging.getLogger("src").critical(
            "Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback)
        )
    previous_hook(exc_type, exc_value, exc_traceback)


def setup_logging(level: int = logging.INFO, fmt: str = LOG_FORMAT) -> bool:
    """
    Configure the root logger and install an uncaught-exception hook, once.

    Safe to call from several threads and on every request.

    Args:
        level: Root logger level for the first configuration.
        fmt: Log record format.

    Returns:
        True if this call configured logging, False if it was already done.
    """
    global _handler

    with _lock:
        if _handler is not None:
            return False

        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))

        root = logging.getLogger()
        root.addHandler(handler)
        root.setLevel(level)

        previous_hook = sys.excepthook
        sys.excepthook = lambda t, v, tb: _log_uncaught_exception(t, v, tb, previous_hook)

        _handler = handler
        logging.getLogger(__name__).debug("Logging configured")
        return True


def is_configured() -> bool:
    return _handler is not None
