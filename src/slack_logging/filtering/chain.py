"""
Ordered filter chains
"""

from typing import Iterable, Iterator, Optional, Tuple

from ..exceptions import FilterRejected
from .base import Filter, PatternLike


class EventFilters:
    """Ordered collection of filters that must all accept a subject.

    Filters are evaluated left to right and evaluation stops at the first
    rejection. The outcome is the logical AND of every filter, so order only
    changes how early a rejection is detected.
    """

    __slots__ = ("_filters",)

    def __init__(self, filters: Iterable[Filter] = ()):
        self._filters: Tuple[Filter, ...] = tuple(filters)

    @classmethod
    def from_patterns(
        cls,
        additive: Iterable[PatternLike] = (),
        subtractive: Iterable[PatternLike] = (),
    ) -> "EventFilters":
        """Build a chain from plain pattern lists"""
        filters = [Filter.additive(p) for p in additive]
        filters.extend(Filter.subtractive(p) for p in subtractive)
        return cls(filters)

    def process(self, subject: str) -> None:
        """Raise FilterRejected if any filter excludes ``subject``"""
        for event_filter in self._filters:
            if event_filter.rejects(subject):
                raise FilterRejected()

    def accepts(self, subject: str) -> bool:
        """Return True if every filter accepts ``subject``"""
        return not any(f.rejects(subject) for f in self._filters)

    def __iter__(self) -> Iterator[Filter]:
        return iter(self._filters)

    def __len__(self) -> int:
        return len(self._filters)

    def __repr__(self) -> str:
        return f"EventFilters({list(self._filters)!r})"


def process_optional(chain: Optional[EventFilters], subject: str) -> None:
    """Run ``chain`` against ``subject``; a missing chain accepts everything"""
    if chain is not None:
        chain.process(subject)
