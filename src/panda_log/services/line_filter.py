"""
Filtered view of a session's line buffer.

The filtered view is a pure projection of an append-only buffer and a query.
Because the buffer never changes except by growing, a result can be cached
on (buffer length, normalized query) and extended incrementally when only
new lines arrived.
"""

import logging
from typing import Optional, Sequence, Tuple

from panda_log.core.classifier import ClassifiedLine, LineCategory

logger = logging.getLogger(__name__)


def normalize_query(query: str) -> str:
    """Trim and lower-case a search query. Empty means no filtering."""
    return query.strip().lower()


def matches(line: ClassifiedLine, normalized_query: str) -> bool:
    """Case-insensitive substring match against an already normalized query."""
    return normalized_query in line.text.lower()


class LineFilter:
    """
    Cached case-insensitive substring filter over an append-only buffer.

    Usage:
        line_filter = LineFilter()
        view = line_filter.apply(session_lines, "error")
    """

    def __init__(self):
        self._cached_query: Optional[str] = None
        self._cached_length = 0
        self._cached_view: Tuple[ClassifiedLine, ...] = ()

    def apply(self, lines: Sequence[ClassifiedLine], query: str) -> Tuple[ClassifiedLine, ...]:
        """
        Return the subsequence of lines containing query, in order.

        Args:
            lines: The full, append-only buffer
            query: Raw query text; whitespace-only means no filtering

        Returns:
            Tuple of matching lines (all lines when the query is empty)
        """
        normalized = normalize_query(query)
        length = len(lines)

        if normalized == self._cached_query and length == self._cached_length:
            return self._cached_view

        if not normalized:
            view = tuple(lines)
        elif normalized == self._cached_query and length > self._cached_length:
            # Append-only: only the new tail needs checking
            tail = tuple(line for line in lines[self._cached_length:] if matches(line, normalized))
            view = self._cached_view + tail
        else:
            view = tuple(line for line in lines if matches(line, normalized))

        self._cached_query = normalized
        self._cached_length = length
        self._cached_view = view
        return view

    def invalidate(self) -> None:
        """Drop the cached result."""
        self._cached_query = None
        self._cached_length = 0
        self._cached_view = ()


def count_category(lines: Sequence[ClassifiedLine], category: LineCategory) -> int:
    """Count lines of one category."""
    return sum(1 for line in lines if line.category is category)
