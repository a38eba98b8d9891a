"""
Main application window.

Hosts one tab per open LogSession. All bookkeeping (duplicate suppression,
selection, reselection after close) is delegated to SessionRegistry; the
window mirrors registry signals into tabs and forwards user intents.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QTabWidget, QToolButton, QLabel, QStackedWidget,
    QFileDialog, QMessageBox,
)

from panda_log import __version__
from panda_log.services.session_registry import SessionRegistry
from panda_log.theming import LogColorScheme
from panda_log.widgets.log_view import LogTabView
from panda_log.widgets.tab_badge import create_badge_icon

logger = logging.getLogger(__name__)

EMPTY_PLACEHOLDER_TEXT = "Open a log file to get started!"
ABOUT_TEXT = (
    f"<b>Panda Log</b> {__version__}<br><br>"
    "A small log viewer that tails files as they grow, highlights errors "
    "and warnings, and filters lines as you type."
)


class LogViewerWindow(QMainWindow):
    """Tabbed log viewer window."""

    def __init__(self, registry: Optional[SessionRegistry] = None, parent=None):
        super().__init__(parent)
        self.registry = registry or SessionRegistry(parent=self)
        self._views: Dict[str, LogTabView] = {}
        self._color_scheme = LogColorScheme.for_palette(self.palette().window().color())

        self.setup_ui()
        self.setup_actions()
        self.setup_connections()

        # Sessions opened before the window existed
        for session in self.registry.sessions():
            self._on_session_opened(session.session_id)
        self._on_selection_changed(self.registry.selected_id, self.registry.previous_id)

    def setup_ui(self) -> None:
        self.setWindowTitle("Panda Log")
        self.setMinimumSize(900, 600)

        self.tab_widget = QTabWidget()
        self.tab_widget.setTabsClosable(True)
        self.tab_widget.setDocumentMode(True)
        self.tab_widget.setElideMode(Qt.TextElideMode.ElideMiddle)

        # "+" button to open new tabs
        self.open_button = QToolButton()
        self.open_button.setText("+")
        self.open_button.setToolTip("Open a new log file")
        self.open_button.setAutoRaise(True)
        self.tab_widget.setCornerWidget(self.open_button, Qt.Corner.TopRightCorner)

        self.placeholder = QLabel(EMPTY_PLACEHOLDER_TEXT)
        self.placeholder.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.placeholder.setEnabled(False)

        self.stack = QStackedWidget()
        self.stack.addWidget(self.placeholder)
        self.stack.addWidget(self.tab_widget)
        self.setCentralWidget(self.stack)
        self._update_placeholder()

    def setup_actions(self) -> None:
        file_menu = self.menuBar().addMenu("&File")

        self.open_action = QAction("Open…", self)
        self.open_action.setShortcut(QKeySequence.StandardKey.Open)
        self.open_action.triggered.connect(self.show_open_dialog)
        file_menu.addAction(self.open_action)

        self.close_tab_action = QAction("Close Tab", self)
        self.close_tab_action.setShortcut(QKeySequence("Ctrl+W"))
        self.close_tab_action.triggered.connect(self.registry.close_selected)
        file_menu.addAction(self.close_tab_action)

        edit_menu = self.menuBar().addMenu("&Edit")

        self.find_action = QAction("Find", self)
        self.find_action.setShortcut(QKeySequence("Ctrl+F"))
        self.find_action.triggered.connect(self.focus_search)
        edit_menu.addAction(self.find_action)

        self.clear_search_action = QAction("Clear Search", self)
        self.clear_search_action.setShortcut(QKeySequence("Ctrl+L"))
        self.clear_search_action.triggered.connect(self.clear_search)
        edit_menu.addAction(self.clear_search_action)

        help_menu = self.menuBar().addMenu("&Help")
        self.about_action = QAction("About Panda Log", self)
        self.about_action.triggered.connect(self.show_about)
        help_menu.addAction(self.about_action)

    def setup_connections(self) -> None:
        self.open_button.clicked.connect(self.show_open_dialog)
        self.tab_widget.currentChanged.connect(self._on_current_tab_changed)
        self.tab_widget.tabCloseRequested.connect(self._on_tab_close_requested)

        self.registry.session_opened.connect(self._on_session_opened)
        self.registry.session_closed.connect(self._on_session_closed)
        self.registry.selection_changed.connect(self._on_selection_changed)

    # Intents

    def open_paths(self, paths: Iterable[Union[str, Path]]) -> List[str]:
        """Open files as tabs; already-open files are not duplicated."""
        return self.registry.open_many(paths)

    def show_open_dialog(self) -> None:
        paths, _ = QFileDialog.getOpenFileNames(self, "Open Log Files")
        if paths:
            self.open_paths(paths)

    def current_view(self) -> Optional[LogTabView]:
        session_id = self.registry.selected_id
        return self._views.get(session_id) if session_id else None

    def focus_search(self) -> None:
        view = self.current_view()
        if view is not None:
            view.focus_search()

    def clear_search(self) -> None:
        view = self.current_view()
        if view is not None:
            view.clear_search()

    def show_about(self) -> None:
        QMessageBox.about(self, "About Panda Log", ABOUT_TEXT)

    # Registry signals

    def _on_session_opened(self, session_id: str) -> None:
        session = self.registry.get(session_id)
        if session is None or session_id in self._views:
            return
        view = LogTabView(session, self._color_scheme)
        self._views[session_id] = view

        index = self.tab_widget.addTab(view, session.display_name)
        self.tab_widget.setTabToolTip(index, str(session.path))
        session.view_changed.connect(lambda sid=session_id: self._update_badge(sid))
        self._update_badge(session_id)
        self._update_placeholder()

    def _on_session_closed(self, session_id: str) -> None:
        view = self._views.pop(session_id, None)
        if view is None:
            return
        index = self.tab_widget.indexOf(view)
        if index >= 0:
            self.tab_widget.removeTab(index)
        view.deleteLater()
        self._update_placeholder()

    def _on_selection_changed(self, session_id: Optional[str], _previous_id: Optional[str]) -> None:
        view = self._views.get(session_id) if session_id else None
        if view is not None and self.tab_widget.currentWidget() is not view:
            self.tab_widget.setCurrentWidget(view)

    # Tab widget signals

    def _session_id_for_index(self, index: int) -> Optional[str]:
        widget = self.tab_widget.widget(index)
        for session_id, view in self._views.items():
            if view is widget:
                return session_id
        return None

    def _on_current_tab_changed(self, index: int) -> None:
        session_id = self._session_id_for_index(index)
        if session_id is not None:
            self.registry.select(session_id)

    def _on_tab_close_requested(self, index: int) -> None:
        session_id = self._session_id_for_index(index)
        if session_id is not None:
            self.registry.close(session_id)

    # Rendering helpers

    def _update_badge(self, session_id: str) -> None:
        session = self.registry.get(session_id)
        view = self._views.get(session_id)
        if session is None or view is None:
            return
        index = self.tab_widget.indexOf(view)
        if index >= 0:
            self.tab_widget.setTabIcon(index, create_badge_icon(session.badge(), self._color_scheme))

    def _update_placeholder(self) -> None:
        self.stack.setCurrentWidget(self.tab_widget if self.tab_widget.count() else self.placeholder)

    def closeEvent(self, event) -> None:
        """Tear down every watcher before the window goes away."""
        self.registry.close_all()
        super().closeEvent(event)
