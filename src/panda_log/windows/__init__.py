"""
Top-level windows.
"""

from .main_window import LogViewerWindow

__all__ = [
    "LogViewerWindow",
]
