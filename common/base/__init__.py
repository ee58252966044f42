"""Low-level shared utilities for the vasu toolkit."""

from .logging import get_logger, setup_logging, VasuLogger

__all__ = [
    "get_logger",
    "setup_logging",
    "VasuLogger",
]
