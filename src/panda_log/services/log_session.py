"""
Per-file session state.

A LogSession owns the append-only line buffer fed by exactly one TailWatcher,
plus the user's search query and follow-tail flag. Views are derived on
demand; observers are told when they may have changed.
"""

import logging
import uuid
from pathlib import Path
from typing import List, Optional, Tuple, Union

from PyQt6.QtCore import QObject, pyqtSignal

from panda_log.core.classifier import ClassifiedLine, LineCategory
from panda_log.core.tail_watcher import TailWatcher
from panda_log.protocols import PandaLogConfig, get_config
from panda_log.services.line_filter import LineFilter, count_category, normalize_query

logger = logging.getLogger(__name__)


class LogSession(QObject):
    """
    One open file: its lines, search query and follow-tail policy.

    Lines arrive from the session's TailWatcher through a signal connection;
    the watcher never touches session state directly. After close() no
    further lines are accepted.

    Scroll-to-end is requested when the session becomes active (by the
    registry), when follow-tail is on and the filtered view grew, or when a
    consumer calls request_scroll_to_end().
    """

    # Signals
    lines_appended = pyqtSignal(int)            # Number of lines added to the buffer
    view_changed = pyqtSignal()                 # Filtered view or counts may differ
    scroll_to_end_requested = pyqtSignal()
    scroll_to_start_requested = pyqtSignal()    # Query changed; anchor on first match
    search_query_changed = pyqtSignal(str)
    follow_tail_changed = pyqtSignal(bool)
    closed = pyqtSignal()

    def __init__(
        self,
        path: Union[str, Path],
        follow_tail: Optional[bool] = None,
        config: Optional[PandaLogConfig] = None,
        parent=None,
    ):
        super().__init__(parent)
        config = config or get_config()
        self.session_id: str = uuid.uuid4().hex
        self.path = Path(path)
        self.display_name: str = self.path.name or str(self.path)
        self._follow_tail = config.follow_tail_default if follow_tail is None else follow_tail
        self._search_query = ""
        self._lines: List[ClassifiedLine] = []
        self._filter = LineFilter()
        self._closed = False

        self._watcher: Optional[TailWatcher] = TailWatcher.open(self.path, config=config, parent=self)
        self._lines.extend(self._watcher.snapshot)
        self._watcher.lines_ready.connect(self._on_lines_ready)
        logger.info(f"Opened session for {self.path} ({len(self._lines)} lines)")

    # Properties

    @property
    def follow_tail(self) -> bool:
        return self._follow_tail

    @property
    def search_query(self) -> str:
        return self._search_query

    @property
    def lines(self) -> Tuple[ClassifiedLine, ...]:
        """Full buffer, read-only."""
        return tuple(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def watcher(self) -> Optional[TailWatcher]:
        return self._watcher

    # Mutations

    def set_follow_tail(self, enabled: bool) -> None:
        """Enable or disable auto-scroll to the newest line."""
        enabled = bool(enabled)
        if enabled == self._follow_tail:
            return
        self._follow_tail = enabled
        logger.debug(f"Follow tail {'enabled' if enabled else 'disabled'} for {self.display_name}")
        self.follow_tail_changed.emit(enabled)
        self.view_changed.emit()

    def set_search_query(self, query: str) -> None:
        """Replace the search query; the filtered view is recomputed on demand."""
        if query == self._search_query:
            return
        self._search_query = query
        self.search_query_changed.emit(query)
        self.view_changed.emit()
        self.scroll_to_start_requested.emit()

    def clear_search_query(self) -> None:
        self.set_search_query("")

    def request_scroll_to_end(self) -> None:
        """Ask observers to anchor on the last line of the filtered view."""
        self.scroll_to_end_requested.emit()

    # Derived views

    def has_query(self) -> bool:
        return bool(normalize_query(self._search_query))

    def filtered_view(self) -> Tuple[ClassifiedLine, ...]:
        """
        Lines matching the search query, in buffer order.

        Returns:
            The whole buffer when the trimmed query is empty, otherwise the
            lines whose text contains the query case-insensitively.
        """
        return self._filter.apply(self._lines, self._search_query)

    def error_count(self) -> int:
        """Number of error lines in the current filtered view."""
        return count_category(self.filtered_view(), LineCategory.ERROR)

    def warning_count(self) -> int:
        """Number of warning lines in the current filtered view."""
        return count_category(self.filtered_view(), LineCategory.WARNING)

    def badge(self) -> Optional[Tuple[LineCategory, int]]:
        """Return the badge to show, errors taking precedence over warnings."""
        errors = self.error_count()
        if errors > 0:
            return LineCategory.ERROR, errors
        warnings = self.warning_count()
        if warnings > 0:
            return LineCategory.WARNING, warnings
        return None

    # Lifecycle

    def close(self) -> None:
        """Tear down the watcher and discard the buffer. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._watcher is not None:
            self._watcher.lines_ready.disconnect(self._on_lines_ready)
            self._watcher.close()
            self._watcher.deleteLater()
            self._watcher = None
        self._lines = []
        self._filter.invalidate()
        logger.info(f"Closed session for {self.path}")
        self.closed.emit()

    def _on_lines_ready(self, batch: List[ClassifiedLine]) -> None:
        if self._closed or not batch:
            return
        previous_visible = len(self.filtered_view())
        self._lines.extend(batch)
        self.lines_appended.emit(len(batch))
        self.view_changed.emit()
        if self._follow_tail and len(self.filtered_view()) > previous_visible:
            self.scroll_to_end_requested.emit()

    def __repr__(self) -> str:
        return f"LogSession(path={str(self.path)!r}, lines={len(self._lines)})"
