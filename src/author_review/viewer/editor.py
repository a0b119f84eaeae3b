"""
External viewer invocation.

The viewer is an editor launched as a child process that blocks until
the user closes the window, so files are reviewed one at a time. The
defaults target the VS Code CLI (``code --diff A B --new-window --wait``);
any editor with a blocking mode can be configured instead.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class ViewerError(Exception):
    """Raised when the viewer is unavailable or exits unsuccessfully."""

    pass


class EditorViewer:
    """Launch an editor on one file, or on two files in diff mode."""

    def __init__(
        self,
        command: str = "code",
        open_args: Sequence[str] = ("--new-window", "--wait"),
        diff_args: Sequence[str] = ("--diff",),
    ) -> None:
        self.command = command
        self.open_args = list(open_args)
        self.diff_args = list(diff_args)
        self._executable: Optional[str] = None

    @classmethod
    def from_settings(cls, settings) -> "EditorViewer":
        return cls(settings.viewer, settings.viewer_args, settings.diff_args)

    def ensure_available(self) -> str:
        """Resolve the viewer executable.

        Raises
        ------
        ViewerError
            If the command is neither on ``PATH`` nor an existing file.
        """
        executable = shutil.which(self.command)
        if executable is None and Path(self.command).is_file():
            executable = self.command
        if executable is None:
            raise ViewerError(f"Viewer command not found: {self.command}")
        self._executable = executable
        return executable

    def open(self, path: Path) -> None:
        """Open a single file and wait for the viewer to close."""
        self._launch([str(path)] + self.open_args)

    def diff(self, left: Path, right: Path) -> None:
        """Open a two-file diff and wait for the viewer to close."""
        self._launch(self.diff_args + [str(left), str(right)] + self.open_args)

    def _launch(self, args: List[str]) -> None:
        cmd = [self._executable or self.command] + args
        logger.debug("Launching viewer: %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd)
        except OSError as exc:
            raise ViewerError(f"Failed to launch {self.command}: {exc}") from exc
        if result.returncode != 0:
            raise ViewerError(f"{self.command} exited with status {result.returncode}")
