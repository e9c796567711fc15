"""
Base filter types for event filtering
"""

import re
from enum import Enum
from typing import Pattern, Union

PatternLike = Union[str, Pattern[str]]


def compile_pattern(pattern: PatternLike) -> Pattern[str]:
    """Compile a pattern unless it is already compiled"""
    if isinstance(pattern, str):
        return re.compile(pattern)
    return pattern


class FilterType(Enum):
    """Direction of a filter's match condition"""

    ADDITIVE = "additive"  # reject when the subject matches
    SUBTRACTIVE = "subtractive"  # reject when the subject does not match


class Filter:
    """A single regex predicate over a target, message or field key"""

    __slots__ = ("pattern", "filter_type")

    def __init__(
        self, pattern: PatternLike, filter_type: FilterType = FilterType.SUBTRACTIVE
    ):
        self.pattern = compile_pattern(pattern)
        self.filter_type = filter_type

    @classmethod
    def additive(cls, pattern: PatternLike) -> "Filter":
        """Filter rejecting subjects that match ``pattern``"""
        return cls(pattern, FilterType.ADDITIVE)

    @classmethod
    def subtractive(cls, pattern: PatternLike) -> "Filter":
        """Filter rejecting subjects that do not match ``pattern``"""
        return cls(pattern, FilterType.SUBTRACTIVE)

    def rejects(self, subject: str) -> bool:
        """Return True if this filter excludes ``subject``"""
        matched = self.pattern.search(subject) is not None
        if self.filter_type is FilterType.ADDITIVE:
            return matched
        return not matched

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Filter):
            return NotImplemented
        return (
            self.pattern == other.pattern and self.filter_type is other.filter_type
        )

    def __hash__(self) -> int:
        return hash((self.pattern, self.filter_type))

    def __repr__(self) -> str:
        return f"Filter({self.pattern.pattern!r}, {self.filter_type})"
