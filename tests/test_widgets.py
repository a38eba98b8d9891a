"""Tests for views and the main window."""

import pytest
from PyQt6.QtCore import Qt

from panda_log.core import LineCategory
from panda_log.services import LogSession, SessionRegistry


@pytest.fixture
def session(qapp, log_file):
    session = LogSession(log_file("INFO start\nERROR disk full\nwarn: low memory\n"))
    yield session
    session.close()


@pytest.fixture
def window(qapp):
    from panda_log.windows import LogViewerWindow

    window = LogViewerWindow(SessionRegistry())
    yield window
    window.close()
    window.registry.close_all()


def test_badge_label():
    """Digits below ten, a bullet otherwise."""
    from panda_log.widgets import badge_label

    assert badge_label(3) == "3"
    assert badge_label(9) == "9"
    assert badge_label(10) == "•"


def test_badge_icon(qapp):
    """Badges render to an icon; no badge gives a null icon."""
    from panda_log.theming import LogColorScheme
    from panda_log.widgets import create_badge_icon

    scheme = LogColorScheme()
    assert create_badge_icon(None, scheme).isNull()
    assert not create_badge_icon((LineCategory.ERROR, 12), scheme).isNull()


def test_table_model_rows(session):
    """Rows mirror the filtered view with 1-based numbers."""
    from panda_log.theming import LogColorScheme
    from panda_log.widgets import LogLineTableModel, LineRole

    model = LogLineTableModel(session, LogColorScheme())
    assert model.rowCount() == 3
    assert model.data(model.index(0, 0)) == "1"
    assert model.data(model.index(1, 1)) == "ERROR disk full"
    assert model.data(model.index(1, 1), LineRole).category is LineCategory.ERROR
    assert model.data(model.index(0, 1), Qt.ItemDataRole.BackgroundRole) is None


def test_table_model_inserts_on_growth(session, log_file, append):
    """New lines under the same query arrive as row insertions."""
    from panda_log.theming import LogColorScheme
    from panda_log.widgets import LogLineTableModel

    model = LogLineTableModel(session, LogColorScheme())
    inserted, resets = [], []
    model.rowsInserted.connect(lambda parent, first, last: inserted.append((first, last)))
    model.modelReset.connect(lambda: resets.append(True))

    append(session.path, "one\ntwo\n")
    session.watcher.read_appended()
    model.refresh()
    assert inserted == [(3, 4)]
    assert resets == []

    session.set_search_query("error")
    model.refresh()
    assert resets == [True]
    assert model.rowCount() == 1


def test_tab_view_tracks_session(session):
    """The view mirrors query, follow flag and result count."""
    from panda_log.widgets import LogTabView

    view = LogTabView(session)
    assert view.result_label.isHidden()

    session.set_search_query("error")
    assert view.search_input.text() == "error"
    assert view.result_label.text() == "1 result"
    assert view.model.rowCount() == 1

    view.clear_search()
    assert session.search_query == ""
    assert view.model.rowCount() == 3

    session.set_follow_tail(False)
    assert not view.follow_tail_cb.isChecked()
    view.follow_tail_cb.setChecked(True)
    assert session.follow_tail


def test_window_placeholder_without_tabs(window):
    """An empty window shows the placeholder."""
    assert window.stack.currentWidget() is window.placeholder
    assert window.current_view() is None


def test_window_opens_tabs_once(window, log_file):
    """One tab per distinct file; the newest is current."""
    a = log_file("ERROR a\n", name="a.log")
    b = log_file("b\n", name="b.log")

    window.open_paths([a, b, a])

    assert window.tab_widget.count() == 2
    assert window.tab_widget.tabText(0) == "a.log"
    assert window.tab_widget.currentIndex() == 1
    assert window.stack.currentWidget() is window.tab_widget
    assert not window.tab_widget.tabIcon(0).isNull()
    assert window.tab_widget.tabIcon(1).isNull()


def test_window_tab_click_selects_session(window, log_file):
    """Changing the current tab updates the registry selection."""
    first, second = window.open_paths([
        log_file("a\n", name="a.log"), log_file("b\n", name="b.log"),
    ])
    window.tab_widget.setCurrentIndex(0)
    assert window.registry.selected_id == first
    assert window.registry.previous_id == second


def test_window_close_tab_reselects(window, log_file):
    """Closing the current tab follows the registry policy."""
    ids = window.open_paths([
        log_file("a\n", name="a.log"),
        log_file("b\n", name="b.log"),
        log_file("c\n", name="c.log"),
    ])
    window.tab_widget.setCurrentIndex(1)

    window.close_tab_action.trigger()

    assert window.tab_widget.count() == 2
    assert window.registry.selected_id == ids[2]
    assert window.tab_widget.currentWidget() is window.current_view()

    window.registry.close_all()
    assert window.tab_widget.count() == 0
    assert window.stack.currentWidget() is window.placeholder


def test_window_clear_search_shortcut(window, log_file):
    """Clear Search empties the active session's query."""
    (session_id,) = window.open_paths([log_file("error\n")])
    session = window.registry.get(session_id)
    session.set_search_query("err")

    window.clear_search_action.trigger()

    assert session.search_query == ""
