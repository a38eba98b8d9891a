"""
Theming.

Category and badge colors for the log views.
"""

from .color_scheme import LogColorScheme

__all__ = [
    "LogColorScheme",
]
