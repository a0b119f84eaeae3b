"""
Materialization of file content at a given revision.

The :class:`ContentMaterializer` reads a path's bytes at a tree
reference, stages them into the scratch area and classifies the staged
file as binary or text. A path that does not exist at the revision (a
newly added file seen from its parent, or a deleted file seen from its
commit) yields an explicit empty blob instead of an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


@dataclass(frozen=True)
class ContentBlob:
    """Content of one path at one revision, staged on disk.

    Attributes
    ----------
    ref : Optional[str]
        Tree reference the content was read from; ``None`` when there is
        no such revision (the parent side of a root commit).
    path : str
        Repository-relative path.
    data : bytes
        Raw content; empty when ``exists`` is False.
    exists : bool
        Whether the path exists at ``ref``.
    is_binary : bool
        Classifier verdict for the staged file.
    scratch_path : Path
        Staged copy handed to the viewer.
    """

    ref: Optional[str]
    path: str
    data: bytes
    exists: bool
    is_binary: bool
    scratch_path: Path


class ContentMaterializer:
    """Stage revision content into a scratch area for viewing.

    Parameters
    ----------
    history : object
        Must implement ``read_blob(ref, path) -> Optional[bytes]``.
    scratch : ScratchArea
        Open scratch area that owns the staged files.
    classifier : object
        Must implement ``is_binary(path) -> bool``.
    """

    def __init__(self, history, scratch, classifier) -> None:
        self.history = history
        self.scratch = scratch
        self.classifier = classifier

    def materialize(self, ref: Optional[str], path: str, label: str = "") -> ContentBlob:
        """Stage ``path`` as it is at ``ref``.

        Absent content is returned as an explicit empty blob with
        ``exists=False``.
        """
        data = self.history.read_blob(ref, path) if ref is not None else None
        if data is None:
            logger.debug("%s absent at %s; staging empty content", path, ref)
            return self._stage(ref, path, b"", exists=False, label=label)
        return self._stage(ref, path, data, exists=True, label=label)

    def empty(self, path: str, label: str = "") -> ContentBlob:
        """Stage an empty file standing in for a path that no longer exists."""
        return self._stage(None, path, b"", exists=False, label=label)

    def _stage(self, ref: Optional[str], path: str, data: bytes, exists: bool, label: str) -> ContentBlob:
        scratch_path = self.scratch.write(path, data, suffix=label)
        is_binary = bool(data) and self.classifier.is_binary(scratch_path)
        return ContentBlob(
            ref=ref,
            path=path,
            data=data,
            exists=exists,
            is_binary=is_binary,
            scratch_path=scratch_path,
        )
