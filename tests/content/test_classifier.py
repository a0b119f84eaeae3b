"""Tests for binary/text classification."""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from author_review.content.classifier import (
    SNIFF_BYTES,
    FileCommandClassifier,
    NulByteClassifier,
    make_classifier,
)


def test_nul_byte_heuristic(tmp_path: Path):
    text = tmp_path / "a.txt"
    text.write_bytes("héllo\nworld\n".encode("utf-8"))
    binary = tmp_path / "b.bin"
    binary.write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00")
    late_nul = tmp_path / "c.txt"
    late_nul.write_bytes(b"a" * SNIFF_BYTES + b"\x00")

    classifier = NulByteClassifier()
    assert classifier.is_binary(text) is False
    assert classifier.is_binary(binary) is True
    assert classifier.is_binary(late_nul) is False


@pytest.mark.parametrize("encoding,expected", [("binary\n", True), ("us-ascii\n", False), ("utf-8\n", False)])
def test_file_command_reports_encoding(tmp_path: Path, encoding, expected):
    target = tmp_path / "f"
    target.write_bytes(b"content")
    with patch("author_review.content.classifier.subprocess.run") as mock_run:
        mock_run.return_value = SimpleNamespace(returncode=0, stdout=encoding, stderr="")
        assert FileCommandClassifier().is_binary(target) is expected
    assert mock_run.call_args[0][0] == ["file", "--brief", "--mime-encoding", str(target)]


def test_file_command_treats_empty_file_as_text(tmp_path: Path):
    target = tmp_path / "empty"
    target.write_bytes(b"")
    with patch("author_review.content.classifier.subprocess.run") as mock_run:
        assert FileCommandClassifier().is_binary(target) is False
    mock_run.assert_not_called()


def test_file_command_falls_back_when_missing(tmp_path: Path):
    target = tmp_path / "blob"
    target.write_bytes(b"\x00\x01")
    with patch("author_review.content.classifier.subprocess.run", side_effect=FileNotFoundError("file")):
        assert FileCommandClassifier().is_binary(target) is True


def test_file_command_falls_back_on_failure(tmp_path: Path):
    target = tmp_path / "text"
    target.write_bytes(b"plain")
    with patch("author_review.content.classifier.subprocess.run") as mock_run:
        mock_run.return_value = SimpleNamespace(returncode=1, stdout="", stderr="cannot open")
        assert FileCommandClassifier().is_binary(target) is False


def test_make_classifier():
    assert isinstance(make_classifier("heuristic"), NulByteClassifier)
    assert isinstance(make_classifier("file"), FileCommandClassifier)
    with patch("author_review.content.classifier.shutil.which", return_value=None):
        assert isinstance(make_classifier("auto"), NulByteClassifier)
    with patch("author_review.content.classifier.shutil.which", return_value="/usr/bin/file"):
        assert isinstance(make_classifier("auto"), FileCommandClassifier)
    with pytest.raises(ValueError):
        make_classifier("magic")
