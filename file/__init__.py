"""Directory reports for the vasu toolkit."""

from .sizer import largest_entries  # noqa: F401
from .counter import count_by_extension  # noqa: F401

__all__ = ["largest_entries", "count_by_extension"]
