"""
Process-owned scratch area for staging file content.

A :class:`ScratchArea` owns one temporary directory for the lifetime of
a ``with`` block. Every exit path removes it: normal return, an early
``SystemExit``, ``KeyboardInterrupt``, and termination by ``SIGTERM`` or
``SIGHUP``, which are turned into ``SystemExit`` while the area is open.
"""

from __future__ import annotations

import logging
import re
import shutil
import signal
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


_UNSAFE_CHARS = re.compile(r"[\\/\s]")
_TERMINATING_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


def safe_name(path: str) -> str:
    """Flatten a repository path into a single file name."""
    flattened = _UNSAFE_CHARS.sub("_", path).strip("_")
    return flattened or "file"


def _raise_system_exit(signum, frame):
    raise SystemExit(128 + signum)


class ScratchArea:
    """Temporary directory holding staged copies of file content."""

    def __init__(self, prefix: str = "author-review-") -> None:
        self.prefix = prefix
        self.root: Optional[Path] = None
        self._counter = 0
        self._previous_handlers: Dict[int, object] = {}

    def __enter__(self) -> "ScratchArea":
        self.root = Path(tempfile.mkdtemp(prefix=self.prefix))
        logger.debug("Created scratch area %s", self.root)
        self._install_signal_handlers()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self._restore_signal_handlers()
        self.cleanup()
        return False

    def _install_signal_handlers(self) -> None:
        # Signal handlers can only be installed from the main thread
        if threading.current_thread() is not threading.main_thread():
            return
        for signum in _TERMINATING_SIGNALS:
            self._previous_handlers[signum] = signal.signal(signum, _raise_system_exit)

    def _restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            # None means the old handler was not installed from Python
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        self._previous_handlers.clear()

    def cleanup(self) -> None:
        """Remove the scratch directory and everything in it."""
        if self.root is None:
            return
        shutil.rmtree(self.root, ignore_errors=True)
        logger.debug("Removed scratch area %s", self.root)
        self.root = None

    def write(self, repo_path: str, data: bytes, suffix: str = "") -> Path:
        """Write ``data`` to a new scratch file named after ``repo_path``."""
        if self.root is None:
            raise RuntimeError("Scratch area is not open")
        self._counter += 1
        # One directory per staged file keeps names unique; the extension is
        # kept last so viewers still pick the right syntax highlighting.
        name = safe_name(repo_path)
        if suffix:
            stem, dot, ext = name.rpartition(".")
            name = f"{stem}_{suffix}.{ext}" if dot and stem else f"{name}_{suffix}"
        slot = self.root / f"{self._counter:04d}"
        slot.mkdir()
        target = slot / name
        target.write_bytes(data)
        return target
