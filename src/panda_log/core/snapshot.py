"""
Initial full-file reads.

Reads a file's existing content once at open time and turns it into
classified lines. Failures are absorbed here: an unreadable or non-UTF-8
file yields an empty snapshot rather than an exception.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, List, Union

from PyQt6.QtCore import QThread, pyqtSignal

from panda_log.core.classifier import ClassifiedLine, classify_lines

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    """Result of an initial read.

    Attributes:
        lines: Classified non-empty lines, numbered from 0
        end_offset: Byte offset just past the content that was read; live
            tailing resumes here
    """
    lines: List[ClassifiedLine] = field(default_factory=list)
    end_offset: int = 0


def split_lines(text: str) -> List[str]:
    """Split text on line boundaries, dropping empty lines."""
    return [line for line in text.splitlines() if line]


def decode_snapshot(data: bytes, path: Union[str, Path] = "<memory>") -> List[ClassifiedLine]:
    """
    Decode raw file bytes into classified lines.

    Args:
        data: Entire file content
        path: Used for log messages only

    Returns:
        List of ClassifiedLine in file order, or an empty list if the bytes
        are not valid UTF-8.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.warning(f"Cannot decode {path} as UTF-8, starting with an empty buffer: {e}")
        return []
    return classify_lines(split_lines(text))


def read_snapshot(handle: BinaryIO, path: Union[str, Path] = "<handle>") -> Snapshot:
    """Read everything from the start of an open binary handle."""
    handle.seek(0)
    data = handle.read()
    return Snapshot(lines=decode_snapshot(data, path), end_offset=len(data))


def read_all(path: Union[str, Path]) -> List[ClassifiedLine]:
    """
    Read a file's current content as classified lines.

    Args:
        path: File to read

    Returns:
        Classified non-empty lines with sequence numbers 0..N-1, or an empty
        list when the file cannot be opened or decoded.
    """
    try:
        with open(path, "rb") as handle:
            return read_snapshot(handle, path).lines
    except OSError as e:
        logger.warning(f"Cannot read {path}: {e}")
        return []


class SnapshotLoader(QThread):
    """Background thread for reading large files without blocking the UI."""

    # Signals
    loaded = pyqtSignal(object)   # Emits Snapshot when read
    load_failed = pyqtSignal(str)  # Emits error message on failure

    def __init__(self, path: Path, parent=None):
        super().__init__(parent)
        self.path = path

    def run(self):
        """Read file content in background thread."""
        try:
            with open(self.path, "rb") as handle:
                snapshot = read_snapshot(handle, self.path)
            self.loaded.emit(snapshot)
        except OSError as e:
            self.load_failed.emit(str(e))
