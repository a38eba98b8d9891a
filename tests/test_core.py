"""Tests for line classification and snapshot reads."""

import pytest

from panda_log.core import (
    ClassifiedLine, LineCategory, classify, classify_lines, read_all, split_lines,
)
from panda_log.core.snapshot import decode_snapshot


@pytest.mark.parametrize("text, expected", [
    ("ERROR disk full", LineCategory.ERROR),
    ("an Error occurred", LineCategory.ERROR),
    ("warn: low memory", LineCategory.WARNING),
    ("WARNING something", LineCategory.WARNING),
    ("INFO start", LineCategory.INFO),
    ("information", LineCategory.INFO),
    ("plain text", LineCategory.OTHER),
    ("", LineCategory.OTHER),
])
def test_classify_categories(text, expected):
    """Case-insensitive substring classification."""
    assert classify(text) is expected


def test_classify_priority_order():
    """Error beats warn beats info."""
    assert classify("warn: error while reading info") is LineCategory.ERROR
    assert classify("info: warning issued") is LineCategory.WARNING


def test_classify_is_deterministic():
    """Same text, same category."""
    assert {classify("Warn once") for _ in range(5)} == {LineCategory.WARNING}


def test_classify_lines_numbers_from_offset():
    """Sequence numbers continue from the given start."""
    lines = classify_lines(["a", "error b"], first_sequence=7)
    assert [line.sequence for line in lines] == [7, 8]
    assert lines[1].category is LineCategory.ERROR


def test_classified_line_is_immutable():
    """Lines are frozen once created."""
    line = ClassifiedLine("x", LineCategory.OTHER, 0)
    with pytest.raises(AttributeError):
        line.text = "y"


def test_split_lines_drops_empty_lines():
    """Blank lines produce no entries; whitespace-only lines are kept."""
    assert split_lines("a\n\n b \r\nc\r\n\n") == ["a", " b ", "c"]


def test_snapshot_skips_blank_lines(log_file):
    """N non-empty lines give N entries numbered 0..N-1."""
    path = log_file("INFO start\n\n\nERROR disk full\n\nwarn: low memory\n")
    lines = read_all(path)
    assert [line.text for line in lines] == ["INFO start", "ERROR disk full", "warn: low memory"]
    assert [line.sequence for line in lines] == [0, 1, 2]
    assert [line.category for line in lines] == [
        LineCategory.INFO, LineCategory.ERROR, LineCategory.WARNING,
    ]


def test_snapshot_keeps_unterminated_last_line(log_file):
    """A final line without newline is still part of the snapshot."""
    path = log_file("first\nsecond")
    assert [line.text for line in read_all(path)] == ["first", "second"]


def test_snapshot_missing_file_is_empty(tmp_path):
    """Unreadable files degrade to an empty snapshot."""
    assert read_all(tmp_path / "missing.log") == []


def test_snapshot_directory_is_empty(tmp_path):
    """Opening a directory is an OSError, absorbed as no data."""
    assert read_all(tmp_path) == []


def test_snapshot_non_utf8_is_empty(tmp_path):
    """Bytes that are not UTF-8 give an empty snapshot."""
    path = tmp_path / "binary.log"
    path.write_bytes(b"ok line\n\xff\xfe\xfa broken\n")
    assert read_all(path) == []


def test_decode_snapshot_utf8():
    """Multi-byte characters survive decoding."""
    lines = decode_snapshot("café error\n".encode("utf-8"))
    assert lines[0].text == "café error"
    assert lines[0].category is LineCategory.ERROR
