"""
Field key exclusion
"""

from typing import Any, Dict, Iterable, Mapping, Pattern, Tuple

from .base import PatternLike, compile_pattern


class FieldSelector:
    """Drops event fields whose key matches any exclusion pattern"""

    __slots__ = ("exclusions",)

    def __init__(self, exclusions: Iterable[PatternLike] = ()):
        self.exclusions: Tuple[Pattern[str], ...] = tuple(
            compile_pattern(p) for p in exclusions
        )

    def is_excluded(self, key: str) -> bool:
        return any(p.search(key) is not None for p in self.exclusions)

    def select(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Return the fields that survive exclusion, preserving order"""
        if not self.exclusions:
            return dict(fields)
        return {k: v for k, v in fields.items() if not self.is_excluded(k)}

    def __len__(self) -> int:
        return len(self.exclusions)
