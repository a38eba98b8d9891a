"""pytest configuration and fixtures for panda-log tests."""

import os
import time

# Headless runs; must be set before the QApplication is created
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtTest import QTest
from PyQt6.QtWidgets import QApplication

from panda_log.protocols import set_config


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts from the default configuration."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def log_file(tmp_path):
    """Factory writing a log file with the given text content."""
    def _make(content="", name="app.log"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _make


@pytest.fixture
def append():
    """Append text or bytes to a file."""
    return _append


def _append(path, data):
    mode = "ab" if isinstance(data, bytes) else "a"
    kwargs = {} if isinstance(data, bytes) else {"encoding": "utf-8"}
    with open(path, mode, **kwargs) as f:
        f.write(data)


@pytest.fixture
def wait_until(qapp):
    """Process Qt events until predicate() is true or the timeout expires."""
    return _wait_until


def _wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            return False
        QTest.qWait(10)
    return True
