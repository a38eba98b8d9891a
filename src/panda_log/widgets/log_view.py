"""
Per-session log view.

Displays one LogSession: follow-tail toggle, search field with result count,
and a virtualized table of the session's filtered lines with 1-based line
numbers. All state lives in the session; this widget only renders it and
forwards user intents.
"""

import logging
from typing import Optional, Tuple

from PyQt6.QtCore import Qt, QAbstractTableModel, QModelIndex, QTimer
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QCheckBox, QLineEdit, QLabel,
    QTableView, QHeaderView, QAbstractItemView,
)

from panda_log.core.classifier import ClassifiedLine
from panda_log.protocols import get_config
from panda_log.services.log_session import LogSession
from panda_log.theming import LogColorScheme

logger = logging.getLogger(__name__)

LINE_NUMBER_COLUMN = 0
TEXT_COLUMN = 1
LineRole = Qt.ItemDataRole.UserRole + 1


class LogLineTableModel(QAbstractTableModel):
    """Table model over a session's filtered view.

    Growth of the view under an unchanged query is reported as row
    insertions so the view keeps its scroll position; anything else resets.
    """

    HEADERS = ("#", "Line")

    def __init__(self, session: LogSession, color_scheme: LogColorScheme, parent=None):
        super().__init__(parent)
        self._session = session
        self._color_scheme = color_scheme
        self._view: Tuple[ClassifiedLine, ...] = session.filtered_view()
        self._query = session.search_query

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:  # type: ignore[override]
        if parent.isValid():
            return 0
        return len(self._view)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:  # type: ignore[override]
        if parent.isValid():
            return 0
        return len(self.HEADERS)

    def headerData(self, section, orientation, role=Qt.ItemDataRole.DisplayRole):  # type: ignore[override]
        if orientation == Qt.Orientation.Horizontal and role == Qt.ItemDataRole.DisplayRole:
            return self.HEADERS[section]
        return None

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole):  # type: ignore[override]
        if not index.isValid():
            return None
        row = index.row()
        if row < 0 or row >= len(self._view):
            return None
        line = self._view[row]
        column = index.column()

        if role == Qt.ItemDataRole.DisplayRole:
            return str(row + 1) if column == LINE_NUMBER_COLUMN else line.text
        if role == Qt.ItemDataRole.ForegroundRole:
            if column == LINE_NUMBER_COLUMN:
                return self._color_scheme.to_qcolor(self._color_scheme.line_number_color)
            return self._color_scheme.foreground_for(line.category)
        if role == Qt.ItemDataRole.BackgroundRole:
            return self._color_scheme.background_for(line.category)
        if role == Qt.ItemDataRole.TextAlignmentRole and column == LINE_NUMBER_COLUMN:
            return Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter
        if role == LineRole:
            return line
        return None

    def line_at(self, row: int) -> Optional[ClassifiedLine]:
        if 0 <= row < len(self._view):
            return self._view[row]
        return None

    def refresh(self) -> None:
        """Pull the session's current filtered view."""
        new_view = self._session.filtered_view()
        old_view = self._view
        query = self._session.search_query

        if new_view is old_view:
            return

        grew = (
            query == self._query
            and len(new_view) > len(old_view)
            and (not old_view or new_view[len(old_view) - 1] is old_view[-1])
        )
        if grew:
            self.beginInsertRows(QModelIndex(), len(old_view), len(new_view) - 1)
            self._view = new_view
            self.endInsertRows()
        else:
            self.beginResetModel()
            self._view = new_view
            self._query = query
            self.endResetModel()


class LogTabView(QWidget):
    """Contents of one tab: toolbar, optional result count and the line table."""

    def __init__(self, session: LogSession, color_scheme: Optional[LogColorScheme] = None, parent=None):
        super().__init__(parent)
        self.session = session
        self._color_scheme = color_scheme or LogColorScheme.for_palette(self.palette().window().color())
        self._search_timer = QTimer(self)
        self._search_timer.setSingleShot(True)
        self._search_timer.setInterval(get_config().search_debounce_ms)

        self.setup_ui()
        self.setup_connections()
        self._update_result_label()

    def setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        # Top toolbar: follow-tail toggle and search field
        toolbar = QHBoxLayout()
        toolbar.setContentsMargins(12, 7, 13, 7)

        self.follow_tail_cb = QCheckBox("Follow Tail")
        self.follow_tail_cb.setChecked(self.session.follow_tail)
        toolbar.addWidget(self.follow_tail_cb)
        toolbar.addStretch()

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search logs...")
        self.search_input.setClearButtonEnabled(True)
        self.search_input.setMaximumWidth(260)
        self.search_input.setText(self.session.search_query)
        toolbar.addWidget(self.search_input)
        layout.addLayout(toolbar)

        self.result_label = QLabel()
        self.result_label.setAlignment(Qt.AlignmentFlag.AlignRight)
        self.result_label.setContentsMargins(0, 0, 13, 4)
        layout.addWidget(self.result_label)

        self.model = LogLineTableModel(self.session, self._color_scheme, self)
        self.table = QTableView()
        self.table.setModel(self.model)
        self.table.setShowGrid(False)
        self.table.setWordWrap(False)
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionResizeMode(LINE_NUMBER_COLUMN, QHeaderView.ResizeMode.Fixed)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.setColumnWidth(LINE_NUMBER_COLUMN, 60)
        self.table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table.setVerticalScrollMode(QAbstractItemView.ScrollMode.ScrollPerPixel)
        font = QFont("Menlo")
        font.setStyleHint(QFont.StyleHint.Monospace)
        font.setPointSize(11)
        self.table.setFont(font)
        self.table.verticalHeader().setDefaultSectionSize(self.table.fontMetrics().height() + 4)
        layout.addWidget(self.table)

    def setup_connections(self) -> None:
        # User intents
        self.follow_tail_cb.toggled.connect(self.session.set_follow_tail)
        self.search_input.textChanged.connect(self._on_search_text_changed)
        self.search_input.returnPressed.connect(self._apply_search)
        self._search_timer.timeout.connect(self._apply_search)

        # Session notifications
        self.session.view_changed.connect(self._on_view_changed)
        self.session.scroll_to_end_requested.connect(self.scroll_to_bottom)
        self.session.scroll_to_start_requested.connect(self.scroll_to_top)
        self.session.follow_tail_changed.connect(self._on_follow_tail_changed)
        self.session.search_query_changed.connect(self._on_query_changed)

    # Intents forwarded from shortcuts

    def focus_search(self) -> None:
        self.search_input.setFocus(Qt.FocusReason.ShortcutFocusReason)
        self.search_input.selectAll()

    def clear_search(self) -> None:
        self._search_timer.stop()
        self.session.clear_search_query()

    # Scrolling

    def scroll_to_bottom(self) -> None:
        # Deferred so freshly inserted rows are laid out first
        QTimer.singleShot(0, self.table.scrollToBottom)

    def scroll_to_top(self) -> None:
        QTimer.singleShot(0, self.table.scrollToTop)

    # Slots

    def _on_search_text_changed(self, _text: str) -> None:
        self._search_timer.start()

    def _apply_search(self) -> None:
        self._search_timer.stop()
        self.session.set_search_query(self.search_input.text())

    def _on_view_changed(self) -> None:
        self.model.refresh()
        self._update_result_label()

    def _on_follow_tail_changed(self, enabled: bool) -> None:
        if self.follow_tail_cb.isChecked() != enabled:
            self.follow_tail_cb.blockSignals(True)
            self.follow_tail_cb.setChecked(enabled)
            self.follow_tail_cb.blockSignals(False)

    def _on_query_changed(self, query: str) -> None:
        if self.search_input.text() != query:
            self.search_input.blockSignals(True)
            self.search_input.setText(query)
            self.search_input.blockSignals(False)

    def _update_result_label(self) -> None:
        if not self.session.search_query:
            self.result_label.hide()
            return
        count = len(self.session.filtered_view())
        self.result_label.setText(f"{count} result{'' if count == 1 else 's'}")
        self.result_label.show()
