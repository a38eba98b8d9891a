"""
Session services.

Per-file session state, derived filtered views and the registry of open
sessions.
"""

from .line_filter import LineFilter, normalize_query, count_category
from .log_session import LogSession
from .session_registry import SessionRegistry, normalize_path

__all__ = [
    "LineFilter",
    "normalize_query",
    "count_category",
    "LogSession",
    "SessionRegistry",
    "normalize_path",
]
