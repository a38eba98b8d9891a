"""
Line classification.

Maps raw log line text to a display category using case-insensitive
substring checks. No parsing of timestamps or fields is attempted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple


class LineCategory(Enum):
    """Display category of a log line."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    OTHER = "other"


# Checked in order; first match wins
_CATEGORY_MARKERS: Tuple[Tuple[str, LineCategory], ...] = (
    ("error", LineCategory.ERROR),
    ("warn", LineCategory.WARNING),
    ("info", LineCategory.INFO),
)


def classify(text: str) -> LineCategory:
    """
    Pure function: classify a single line of text.

    Args:
        text: Raw line content without trailing newline

    Returns:
        LineCategory: ERROR if the text contains "error", else WARNING if it
        contains "warn", else INFO if it contains "info", else OTHER.
    """
    lowered = text.lower()
    for marker, category in _CATEGORY_MARKERS:
        if marker in lowered:
            return category
    return LineCategory.OTHER


@dataclass(frozen=True)
class ClassifiedLine:
    """A single observed log line.

    Attributes:
        text: Raw line content, no trailing newline
        category: Category derived from text
        sequence: Position within the owning session, gap-free from 0
    """
    text: str
    category: LineCategory
    sequence: int


def classify_lines(texts: Iterable[str], first_sequence: int = 0) -> List[ClassifiedLine]:
    """Classify texts in order, numbering them from first_sequence."""
    return [
        ClassifiedLine(text=text, category=classify(text), sequence=first_sequence + offset)
        for offset, text in enumerate(texts)
    ]
