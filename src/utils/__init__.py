"""
Shared Utilities

Logging, file I/O and drawing helpers used by the scanner entry points.
"""

from src.utils.logging_config import setup_logging

__all__ = [
    "setup_logging",
]
