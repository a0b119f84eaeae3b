"""
Git client implementation for author_review.

This module wraps the read-only Git queries the history walker needs:
listing an author's commits in a range, the files each commit touched,
a commit's stat summary, and the content of a path at any revision. All
subprocess calls go through :meth:`GitClient._run` so that unit tests
can mock them easily.

Path-bearing commands use NUL-separated output (``-z``), read as raw
bytes and decoded with :func:`os.fsdecode`, so file names containing
spaces, newlines or bytes that are not valid UTF-8 survive intact and
can be passed back to Git unchanged.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Set, Tuple


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# Field and record separators for ``git log --format``
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_TRAILER_SEP = "\x1d"

_LOG_FORMAT = (
    "%H%x1f%P%x1f%an%x1f%ae%x1f%s%x1f"
    "%(trailers:key=Co-authored-by,valueonly,separator=%x1d)%x1e"
)


@dataclass(frozen=True)
class CommitInfo:
    """A single commit as reported by ``git log``."""

    sha: str
    parents: Tuple[str, ...]
    author_name: str
    author_email: str
    subject: str
    co_authors: Tuple[str, ...] = ()

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    @property
    def parent(self) -> Optional[str]:
        """First parent, or ``None`` for a root commit."""
        return self.parents[0] if self.parents else None

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


@dataclass(frozen=True)
class FileChange:
    """Representation of a single file changed by a commit."""

    path: str
    status: str  # 'A' added, 'M' modified, 'D' deleted, 'T' type change

    @property
    def deleted(self) -> bool:
        return self.status == "D"


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for querying the history of a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached. ``.git`` may be a file for worktrees and
        submodules.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                # reached filesystem root
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root and decode its output.

        Raises
        ------
        GitError
            If Git cannot be executed, or if the command exits with a
            non-zero status when ``check`` is True.
        """
        full_cmd = ["git", "--no-pager"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid characters instead of failing
            )
        except OSError as e:
            logger.error("Unable to execute git: %s", e)
            raise GitError(f"Unable to execute git: {e}") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    def _run_bytes(self, args: List[str], check: bool = False) -> subprocess.CompletedProcess:
        """Run a Git command and return its raw (undecoded) output.

        Raises
        ------
        GitError
            If Git cannot be executed, or if the command exits with a
            non-zero status when ``check`` is True.
        """
        full_cmd = ["git", "--no-pager"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            logger.error("Unable to execute git: %s", e)
            raise GitError(f"Unable to execute git: {e}") from e

        if check and result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            logger.error("Git command failed: %s\nSTDERR: %s", " ".join(full_cmd), stderr)
            raise GitError(stderr or f"git {args[0]} exited with status {result.returncode}")
        return result

    @staticmethod
    def _split_paths(raw: bytes) -> List[str]:
        """Split NUL-separated output into paths, decoded as file names."""
        return [os.fsdecode(token) for token in raw.split(b"\0") if token]

    # ------------------------------------------------------------------
    # History queries
    # ------------------------------------------------------------------
    def verify_ref(self, ref: str) -> str:
        """Resolve ``ref`` to a full commit sha.

        Raises
        ------
        GitError
            If ``ref`` does not name a commit in this repository.
        """
        result = self._run(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"], check=False)
        sha = result.stdout.strip()
        if result.returncode != 0 or not sha:
            raise GitError(f"Unknown or unreachable revision: {ref}")
        return sha

    def list_commits(self, start_ref: str, author: str, tip: str = "HEAD") -> List[CommitInfo]:
        """List non-merge commits by ``author`` in ``start_ref..tip``.

        Commits are returned oldest first. ``author`` is passed to
        ``git log --author`` and is therefore matched against
        ``Name <email>`` the way Git matches it.

        Raises
        ------
        GitError
            If the range cannot be resolved.
        """
        result = self._run(
            [
                "log",
                "--no-merges",
                "--reverse",
                "--no-color",
                f"--author={author}",
                f"--format={_LOG_FORMAT}",
                f"{start_ref}..{tip}",
                "--",
            ],
            check=True,
        )
        commits: List[CommitInfo] = []
        for record in result.stdout.split(_RECORD_SEP):
            record = record.lstrip("\n")
            if not record:
                continue
            fields = record.split(_FIELD_SEP)
            if len(fields) != 6:
                logger.warning("Ignoring malformed git log record: %r", record)
                continue
            sha, parents, name, email, subject, trailers = fields
            co_authors = tuple(
                value.strip() for value in trailers.split(_TRAILER_SEP) if value.strip()
            )
            commits.append(
                CommitInfo(
                    sha=sha,
                    parents=tuple(parents.split()),
                    author_name=name,
                    author_email=email,
                    subject=subject,
                    co_authors=co_authors,
                )
            )
        logger.debug("git log returned %d commit(s) for %s", len(commits), author)
        return commits

    def commit_stat(self, sha: str) -> List[str]:
        """Return the ``--stat`` summary lines of a commit."""
        result = self._run(["show", "--stat", "--format=", "--no-color", sha], check=True)
        return [line for line in result.stdout.splitlines() if line.strip()]

    def changed_files(self, sha: str) -> List[FileChange]:
        """Return the files a commit changed relative to its first parent.

        Renames are reported as a deletion plus an addition. A root commit
        is compared with the empty tree.
        """
        result = self._run_bytes(
            [
                "diff-tree",
                "-r",
                "-z",
                "--no-commit-id",
                "--no-renames",
                "--name-status",
                "--root",
                sha,
            ],
            check=True,
        )
        tokens = result.stdout.split(b"\0")
        changes: List[FileChange] = []
        # Output alternates: STATUS NUL PATH NUL ...
        for status, path in zip(tokens[0::2], tokens[1::2]):
            if not status or not path:
                continue
            changes.append(FileChange(path=os.fsdecode(path), status=chr(status[0])))
        return changes

    def read_blob(self, ref: str, path: str) -> Optional[bytes]:
        """Return the bytes of ``path`` at ``ref``, or ``None`` if absent."""
        # subprocess encodes arguments with os.fsencode, the inverse of the
        # decoding applied to paths read from Git
        result = self._run_bytes(["cat-file", "blob", f"{ref}:{path}"])
        if result.returncode != 0:
            logger.debug(
                "No content for %s at %s: %s",
                path,
                ref,
                result.stderr.decode("utf-8", errors="replace").strip(),
            )
            return None
        return result.stdout

    def tree_paths(self, ref: str = "HEAD") -> Set[str]:
        """Return every file path in the tree of ``ref``."""
        result = self._run_bytes(["ls-tree", "-r", "-z", "--name-only", ref], check=True)
        return set(self._split_paths(result.stdout))
