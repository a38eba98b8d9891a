"""
Tailing engine.

Line classification, initial snapshot reads and live tailing of appended
bytes. No session or UI state lives here.
"""

from .classifier import LineCategory, ClassifiedLine, classify, classify_lines
from .snapshot import Snapshot, SnapshotLoader, read_all, read_snapshot, split_lines
from .tail_watcher import TailWatcher, WatcherState

__all__ = [
    "LineCategory",
    "ClassifiedLine",
    "classify",
    "classify_lines",
    "Snapshot",
    "SnapshotLoader",
    "read_all",
    "read_snapshot",
    "split_lines",
    "TailWatcher",
    "WatcherState",
]
