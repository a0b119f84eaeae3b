"""
Binary/text classification of staged files.

The default classifier asks the external ``file`` tool for the file's
MIME encoding, which reports ``binary`` for anything that is not text.
When ``file`` is not installed, Git's own heuristic is used instead: a
NUL byte within the first 8000 bytes marks the content as binary.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# Same window Git inspects when deciding whether a blob is binary
SNIFF_BYTES = 8000


class NulByteClassifier:
    """Classify a file as binary when it contains a NUL byte near the start."""

    name = "heuristic"

    def is_binary(self, path: Path) -> bool:
        with open(path, "rb") as fh:
            head = fh.read(SNIFF_BYTES)
        return b"\0" in head


class FileCommandClassifier:
    """Classify a file with ``file --brief --mime-encoding``."""

    name = "file"

    def __init__(self, command: str = "file") -> None:
        self.command = command
        self._fallback = NulByteClassifier()

    def is_binary(self, path: Path) -> bool:
        # `file` reports empty files as binary; an empty file is text to us
        if path.stat().st_size == 0:
            return False
        try:
            result = subprocess.run(
                [self.command, "--brief", "--mime-encoding", str(path)],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except OSError as exc:
            logger.warning("Could not run %s (%s); using NUL-byte heuristic", self.command, exc)
            return self._fallback.is_binary(path)
        if result.returncode != 0:
            logger.warning(
                "%s failed on %s: %s; using NUL-byte heuristic",
                self.command,
                path,
                result.stderr.strip(),
            )
            return self._fallback.is_binary(path)
        encoding = result.stdout.strip().lower()
        logger.debug("%s reports %s for %s", self.command, encoding, path)
        return encoding == "binary"


def make_classifier(kind: str = "auto"):
    """Return a classifier for the configured ``kind``.

    ``auto`` picks :class:`FileCommandClassifier` when ``file`` is on
    ``PATH`` and :class:`NulByteClassifier` otherwise.
    """
    if kind == "heuristic":
        return NulByteClassifier()
    if kind == "file":
        return FileCommandClassifier()
    if kind == "auto":
        if shutil.which("file"):
            return FileCommandClassifier()
        logger.debug("'file' not found on PATH; using NUL-byte heuristic")
        return NulByteClassifier()
    raise ValueError(f"Unknown classifier: {kind}")
