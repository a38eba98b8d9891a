"""
Open-session bookkeeping.

Tracks the ordered list of open LogSessions (tab order), guarantees at most
one session per file path, and maintains the selected and previously selected
session ids.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from PyQt6.QtCore import QObject, pyqtSignal

from panda_log.protocols import PandaLogConfig
from panda_log.services.log_session import LogSession

logger = logging.getLogger(__name__)


def normalize_path(path: Union[str, Path]) -> Path:
    """Absolute, user-expanded form of a path used as the session key."""
    return Path(path).expanduser().resolve()


class SessionRegistry(QObject):
    """
    Registry of open log sessions.

    Usage:
        registry = SessionRegistry()
        session_id = registry.open("/var/log/syslog")
        registry.select(session_id)
        registry.close(session_id)

    Reselection after closing the selected session: the session now at the
    same position, else the new last session, else nothing.
    """

    # Signals
    session_opened = pyqtSignal(str)             # session id
    session_closed = pyqtSignal(str)             # session id
    selection_changed = pyqtSignal(object, object)  # (new id, previous id), either may be None

    def __init__(self, config: Optional[PandaLogConfig] = None, parent=None):
        super().__init__(parent)
        self._config = config
        self._sessions: List[LogSession] = []
        self._by_id: Dict[str, LogSession] = {}
        self._selected_id: Optional[str] = None
        self._previous_id: Optional[str] = None

    # Queries

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def previous_id(self) -> Optional[str]:
        """Selection before the current one; consumed by scroll-reset logic."""
        return self._previous_id

    @property
    def selected_session(self) -> Optional[LogSession]:
        if self._selected_id is None:
            return None
        return self._by_id.get(self._selected_id)

    def sessions(self) -> List[LogSession]:
        """Open sessions in tab order."""
        return list(self._sessions)

    def get(self, session_id: str) -> Optional[LogSession]:
        return self._by_id.get(session_id)

    def index_of(self, session_id: str) -> int:
        """Position of a session in tab order, or -1."""
        for index, session in enumerate(self._sessions):
            if session.session_id == session_id:
                return index
        return -1

    def find_by_path(self, path: Union[str, Path]) -> Optional[LogSession]:
        key = normalize_path(path)
        for session in self._sessions:
            if session.path == key:
                return session
        return None

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[LogSession]:
        return iter(list(self._sessions))

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._by_id

    # Intents

    def open(self, path: Union[str, Path]) -> str:
        """
        Open a file, or return the id of the session already showing it.

        A new session is appended to the tab order and selected. Opening
        never fails: missing or unreadable files give an empty session.

        Args:
            path: File to open

        Returns:
            str: Session id
        """
        existing = self.find_by_path(path)
        if existing is not None:
            logger.debug(f"{existing.path} is already open")
            return existing.session_id

        session = LogSession(normalize_path(path), config=self._config, parent=self)
        self._sessions.append(session)
        self._by_id[session.session_id] = session
        self.session_opened.emit(session.session_id)
        self.select(session.session_id)
        return session.session_id

    def open_many(self, paths: Iterable[Union[str, Path]]) -> List[str]:
        """Open several files (e.g. from a file picker), suppressing duplicates."""
        session_ids: List[str] = []
        for path in paths:
            session_id = self.open(path)
            if session_id not in session_ids:
                session_ids.append(session_id)
        return session_ids

    def select(self, session_id: Optional[str]) -> None:
        """Make a session the active one and remember the prior selection."""
        if session_id is not None and session_id not in self._by_id:
            logger.debug(f"Ignoring selection of unknown session {session_id}")
            return
        self._set_selection(session_id)

    def close(self, session_id: str) -> None:
        """Close a session and tear down its watcher. Unknown ids are ignored."""
        index = self.index_of(session_id)
        if index < 0:
            logger.debug(f"Ignoring close of unknown session {session_id}")
            return

        session = self._sessions.pop(index)
        del self._by_id[session_id]
        session.close()
        session.deleteLater()

        if self._previous_id == session_id:
            self._previous_id = None

        if self._selected_id == session_id:
            if index < len(self._sessions):
                replacement: Optional[str] = self._sessions[index].session_id
            elif self._sessions:
                replacement = self._sessions[-1].session_id
            else:
                replacement = None
            # A closed session is never reported as the previous selection
            self._set_selection(replacement, forget_previous=True)

        self.session_closed.emit(session_id)

    def close_selected(self) -> None:
        if self._selected_id is not None:
            self.close(self._selected_id)

    def close_all(self) -> None:
        """Close every session, e.g. on application shutdown."""
        for session in list(self._sessions):
            self.close(session.session_id)

    def _set_selection(self, session_id: Optional[str], forget_previous: bool = False) -> None:
        if session_id == self._selected_id:
            return
        previous = None if forget_previous else self._selected_id
        self._previous_id = previous
        self._selected_id = session_id
        self.selection_changed.emit(session_id, previous)

        session = self.selected_session
        if session is not None:
            session.request_scroll_to_end()
