"""Small colored dot with a count, shown on tab headers for errors/warnings."""

from typing import Optional, Tuple

from PyQt6.QtCore import Qt, QRectF
from PyQt6.QtGui import QFont, QIcon, QPainter, QPixmap

from panda_log.core.classifier import LineCategory
from panda_log.theming import LogColorScheme

BADGE_SIZE = 14
BULLET = "•"


def badge_label(count: int) -> str:
    """Digit for single-digit counts, a bullet for anything larger."""
    return str(count) if count < 10 else BULLET


def create_badge_icon(
    badge: Optional[Tuple[LineCategory, int]],
    color_scheme: LogColorScheme,
    size: int = BADGE_SIZE,
) -> QIcon:
    """
    Render a session badge as an icon.

    Args:
        badge: (category, count) from LogSession.badge(), or None
        color_scheme: Colors for the dot and its label
        size: Icon edge length in pixels

    Returns:
        QIcon: The badge, or an empty icon when there is nothing to show
    """
    if badge is None:
        return QIcon()

    category, count = badge
    pixmap = QPixmap(size, size)
    pixmap.fill(Qt.GlobalColor.transparent)

    painter = QPainter(pixmap)
    try:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(color_scheme.badge_color_for(category))
        painter.drawEllipse(QRectF(0, 0, size, size))

        font = QFont()
        font.setBold(True)
        font.setPixelSize(max(6, size - 5))
        painter.setFont(font)
        painter.setPen(color_scheme.to_qcolor(color_scheme.badge_text_color))
        painter.drawText(QRectF(0, 0, size, size), Qt.AlignmentFlag.AlignCenter, badge_label(count))
    finally:
        painter.end()

    return QIcon(pixmap)
