"""
Regex based event filtering for Slack forwarding
"""

from .base import Filter, FilterType
from .chain import EventFilters, process_optional
from .fields import FieldSelector

__all__ = [
    "FilterType",
    "Filter",
    "EventFilters",
    "process_optional",
    "FieldSelector",
]
