"""
Log viewing widgets.
"""

from .log_view import LogLineTableModel, LogTabView, LineRole
from .tab_badge import badge_label, create_badge_icon

__all__ = [
    "LogLineTableModel",
    "LogTabView",
    "LineRole",
    "badge_label",
    "create_badge_icon",
]
