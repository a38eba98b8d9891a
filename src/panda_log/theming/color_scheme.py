"""
Colors for classified log lines and tab badges.

Follows the semantic-name dataclass pattern: RGB tuples with light/dark
variants and helpers to convert them to Qt colors.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from PyQt6.QtGui import QColor

from panda_log.core.classifier import LineCategory

logger = logging.getLogger(__name__)


@dataclass
class LogColorScheme:
    """
    Color scheme for log lines with semantic color names.

    Row tints carry an alpha component; everything else is opaque RGB.
    """

    # Line foreground per category
    error_color: Tuple[int, int, int] = (255, 85, 85)      # Red
    warning_color: Tuple[int, int, int] = (255, 140, 0)    # Orange
    info_color: Tuple[int, int, int] = (100, 160, 210)     # Steel blue
    other_color: Optional[Tuple[int, int, int]] = None     # Palette default

    # Row background tints
    error_row_tint: Tuple[int, int, int, int] = (255, 0, 0, 20)
    warning_row_tint: Tuple[int, int, int, int] = (255, 140, 0, 15)

    # Gutter and badges
    line_number_color: Tuple[int, int, int] = (128, 128, 128)
    badge_error_color: Tuple[int, int, int] = (220, 40, 40)
    badge_warning_color: Tuple[int, int, int] = (240, 140, 0)
    badge_text_color: Tuple[int, int, int] = (255, 255, 255)

    @classmethod
    def create_dark_theme(cls) -> 'LogColorScheme':
        """Brighter foregrounds for dark backgrounds."""
        return cls(
            error_color=(255, 100, 100),
            info_color=(120, 180, 230),
            line_number_color=(160, 160, 160),
        )

    @classmethod
    def create_light_theme(cls) -> 'LogColorScheme':
        """Darker foregrounds for light backgrounds."""
        return cls(
            error_color=(180, 20, 40),
            warning_color=(200, 100, 0),
            info_color=(30, 80, 130),
            line_number_color=(100, 100, 100),
        )

    @classmethod
    def for_palette(cls, window_color: QColor) -> 'LogColorScheme':
        """Pick the variant matching a window background color."""
        if window_color.lightness() < 128:
            return cls.create_dark_theme()
        return cls.create_light_theme()

    def to_qcolor(self, color_tuple: Tuple[int, ...]) -> QColor:
        """Convert an RGB or RGBA tuple to QColor."""
        return QColor(*color_tuple)

    def foreground_for(self, category: LineCategory) -> Optional[QColor]:
        """Text color for a category, or None to use the palette default."""
        color = {
            LineCategory.ERROR: self.error_color,
            LineCategory.WARNING: self.warning_color,
            LineCategory.INFO: self.info_color,
            LineCategory.OTHER: self.other_color,
        }[category]
        return self.to_qcolor(color) if color is not None else None

    def background_for(self, category: LineCategory) -> Optional[QColor]:
        """Row tint for a category; only errors and warnings are tinted."""
        if category is LineCategory.ERROR:
            return self.to_qcolor(self.error_row_tint)
        if category is LineCategory.WARNING:
            return self.to_qcolor(self.warning_row_tint)
        return None

    def badge_color_for(self, category: LineCategory) -> QColor:
        if category is LineCategory.ERROR:
            return self.to_qcolor(self.badge_error_color)
        if category is LineCategory.WARNING:
            return self.to_qcolor(self.badge_warning_color)
        raise ValueError(f"No badge color for {category}")
