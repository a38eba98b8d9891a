"""
Real-time file tailing.

A TailWatcher owns one open file handle. After the initial snapshot it reacts
to QFileSystemWatcher change notifications (and optionally a polling timer),
reads whatever bytes were appended past its cursor, and publishes the new
classified lines through the ``lines_ready`` signal.

All reads happen on the thread that owns the watcher (the GUI thread), so
lines are published strictly in file order. The watcher never holds a
reference to its consumer; consumers connect to its signals.
"""

import codecs
import logging
import os
from enum import Enum
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from PyQt6.QtCore import QObject, QFileSystemWatcher, QTimer, pyqtSignal

from panda_log.core.classifier import ClassifiedLine, classify_lines
from panda_log.core.snapshot import Snapshot, SnapshotLoader, read_snapshot
from panda_log.protocols import PandaLogConfig, get_config

logger = logging.getLogger(__name__)


class WatcherState(Enum):
    """Lifecycle of a TailWatcher."""
    INITIALIZING = "initializing"
    WATCHING = "watching"
    CLOSED = "closed"


class TailWatcher(QObject):
    """
    Tail a single file and publish classified lines as they are appended.

    Attributes:
        path: File being tailed.
        state: Current WatcherState.
        snapshot: Lines read at open time (empty until a background
            snapshot finishes, in which case they arrive via lines_ready).

    Example:
        >>> watcher = TailWatcher.open("/var/log/app.log")
        >>> watcher.lines_ready.connect(on_lines)
        >>> watcher.close()
    """

    # Signals
    lines_ready = pyqtSignal(list)  # Ordered batch of ClassifiedLine
    truncated = pyqtSignal()        # File shrank below the read cursor
    stopped = pyqtSignal()          # File vanished, was replaced or became unreadable

    def __init__(self, path: Union[str, Path], config: Optional[PandaLogConfig] = None, parent=None):
        super().__init__(parent)
        self.path = Path(path)
        self.state = WatcherState.INITIALIZING
        self.snapshot: List[ClassifiedLine] = []
        self._config = config or get_config()
        self._handle: Optional[BinaryIO] = None
        self._cursor = 0
        self._next_sequence = 0
        # Incremental so a multi-byte character split across two reads still decodes
        self._decoder = codecs.getincrementaldecoder("utf-8")()
        self._partial = ""
        self._fs_watcher: Optional[QFileSystemWatcher] = None
        self._poll_timer: Optional[QTimer] = None
        self._loader: Optional[SnapshotLoader] = None

    @classmethod
    def open(cls, path: Union[str, Path], config: Optional[PandaLogConfig] = None, parent=None) -> "TailWatcher":
        """Create a watcher, read its snapshot and arm the file watch."""
        watcher = cls(path, config=config, parent=parent)
        watcher.start()
        return watcher

    @property
    def cursor(self) -> int:
        """Byte offset of the next unread byte."""
        return self._cursor

    @property
    def is_armed(self) -> bool:
        """True while file change notifications are being delivered."""
        return self._fs_watcher is not None

    def start(self) -> None:
        """Perform the snapshot read and start watching."""
        if self.state is not WatcherState.INITIALIZING:
            return

        try:
            self._handle = open(self.path, "rb")
        except OSError as e:
            # Opening never fails outright; the session simply never grows
            logger.warning(f"Cannot open {self.path} for tailing: {e}")
            self.state = WatcherState.WATCHING
            return

        threshold = self._config.async_load_threshold_bytes
        if threshold is not None and self._file_size() >= threshold:
            logger.debug(f"Loading {self.path} asynchronously")
            self._loader = SnapshotLoader(self.path)
            self._loader.loaded.connect(self._on_snapshot_loaded)
            self._loader.load_failed.connect(self._on_snapshot_failed)
            self._loader.start()
            return

        try:
            snapshot = read_snapshot(self._handle, self.path)
        except OSError as e:
            logger.warning(f"Cannot read {self.path}: {e}")
            snapshot = Snapshot()
        self.snapshot = snapshot.lines
        self._begin_watching(snapshot.end_offset)

    def read_appended(self) -> List[ClassifiedLine]:
        """
        Read bytes appended since the last read and publish them.

        Called on every change notification; safe to call directly.

        Returns:
            List[ClassifiedLine]: Lines published by this call (possibly empty).
        """
        if self.state is not WatcherState.WATCHING or self._handle is None:
            return []

        try:
            size = os.fstat(self._handle.fileno()).st_size

            # Detect truncation (copy-truncate rotation, manual clear, etc.)
            if size < self._cursor:
                logger.info(f"{self.path} was truncated, reading from the start")
                self._cursor = 0
                self._partial = ""
                self._decoder.reset()
                self.truncated.emit()

            if size == self._cursor:
                return []

            self._handle.seek(self._cursor)
            data = self._handle.read(size - self._cursor)
        except (OSError, ValueError) as e:
            logger.warning(f"Tailing {self.path} stopped: {e}")
            self._stop()
            return []

        self._cursor += len(data)
        texts = self._decode_lines(data)
        if not texts:
            return []

        batch = classify_lines(texts, self._next_sequence)
        self._next_sequence += len(batch)
        self.lines_ready.emit(batch)
        return batch

    def close(self) -> None:
        """Stop watching and release the file handle. Idempotent."""
        if self.state is WatcherState.CLOSED:
            return
        self.state = WatcherState.CLOSED

        if self._loader is not None:
            self._loader.loaded.disconnect(self._on_snapshot_loaded)
            self._loader.load_failed.disconnect(self._on_snapshot_failed)
            # The loader holds no shared state; just let it finish
            self._loader.wait()
            self._loader = None

        self._disarm()

        if self._handle is not None:
            self._handle.close()
            self._handle = None
        logger.debug(f"Closed watcher for {self.path}")

    # Internals

    def _file_size(self) -> int:
        try:
            return os.fstat(self._handle.fileno()).st_size
        except OSError:
            return 0

    def _begin_watching(self, offset: int) -> None:
        self._cursor = offset
        self._next_sequence = len(self.snapshot)
        self.state = WatcherState.WATCHING

        self._fs_watcher = QFileSystemWatcher(self)
        if not self._fs_watcher.addPath(str(self.path)):
            logger.warning(f"Could not arm file watch on {self.path}")
        self._fs_watcher.fileChanged.connect(self._on_file_changed)

        interval = self._config.poll_interval_ms
        if interval > 0:
            self._poll_timer = QTimer(self)
            self._poll_timer.timeout.connect(self._refresh)
            self._poll_timer.start(interval)

        logger.debug(f"Watching {self.path} from offset {offset}")

    def _disarm(self) -> None:
        if self._poll_timer is not None:
            self._poll_timer.stop()
            self._poll_timer.deleteLater()
            self._poll_timer = None
        if self._fs_watcher is not None:
            self._fs_watcher.fileChanged.disconnect(self._on_file_changed)
            files = self._fs_watcher.files()
            if files:
                self._fs_watcher.removePaths(files)
            self._fs_watcher.deleteLater()
            self._fs_watcher = None

    def _decode_lines(self, data: bytes) -> List[str]:
        try:
            text = self._decoder.decode(data)
        except UnicodeDecodeError as e:
            logger.warning(f"Dropping undecodable chunk from {self.path}: {e}")
            self._decoder.reset()
            return []

        text = self._partial + text
        self._partial = ""
        parts = text.splitlines()
        if self._config.hold_partial_lines and parts and not text.endswith(("\n", "\r")):
            self._partial = parts.pop()
        return [part for part in parts if part]

    def _stop(self) -> None:
        self._disarm()
        self.stopped.emit()

    def _source_gone(self) -> bool:
        """True once the path no longer names the file behind our handle."""
        try:
            held = os.fstat(self._handle.fileno())
            current = os.stat(self.path)
        except (OSError, ValueError):
            return True
        # Unlinked while open, or a new file was created at the path
        return held.st_nlink == 0 or (held.st_dev, held.st_ino) != (current.st_dev, current.st_ino)

    def _refresh(self) -> None:
        # Drain what was written to the held file before checking its identity
        self.read_appended()
        if self._fs_watcher is None or self._handle is None:
            return

        if self._source_gone():
            logger.info(f"{self.path} was removed or replaced, tailing stopped")
            self._stop()
            return

        # QFileSystemWatcher may drop a path after some in-place rewrites
        path = str(self.path)
        if path not in self._fs_watcher.files():
            self._fs_watcher.addPath(path)

    def _on_file_changed(self, _path: str) -> None:
        self._refresh()

    def _release_loader(self) -> None:
        loader, self._loader = self._loader, None
        if loader is not None:
            # run() may still be returning after emitting
            loader.wait()

    def _on_snapshot_loaded(self, snapshot: Snapshot) -> None:
        self._release_loader()
        if self.state is not WatcherState.INITIALIZING:
            return
        self.snapshot = snapshot.lines
        if snapshot.lines:
            self.lines_ready.emit(list(snapshot.lines))
        self._begin_watching(snapshot.end_offset)
        # Pick up anything written while the snapshot was loading
        self.read_appended()

    def _on_snapshot_failed(self, error_msg: str) -> None:
        self._release_loader()
        if self.state is not WatcherState.INITIALIZING:
            return
        logger.warning(f"Cannot read {self.path}: {error_msg}")
        self._begin_watching(self._file_size())
