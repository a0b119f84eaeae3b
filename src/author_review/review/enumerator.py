"""
History enumeration and changed-path resolution.

The history store is any object implementing the query methods of
:class:`author_review.vcs.git_client.GitClient` (``list_commits``,
``changed_files``); tests pass in-memory fakes.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from author_review.vcs.git_client import CommitInfo, FileChange, GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


def enumerate_commits(
    history,
    start_ref: str,
    author: str,
    allow_coauthored: bool = False,
) -> Iterator[CommitInfo]:
    """Yield single-author, non-merge commits by ``author`` after ``start_ref``.

    Commits come oldest first and are reachable from the branch tip but
    not from ``start_ref``. Errors resolving the range propagate from the
    history store.
    """
    for commit in history.list_commits(start_ref, author):
        if commit.is_merge:
            logger.debug("Skipping merge commit %s", commit.short_sha)
            continue
        if commit.co_authors and not allow_coauthored:
            logger.debug(
                "Skipping %s: co-authored by %s",
                commit.short_sha,
                ", ".join(commit.co_authors),
            )
            continue
        yield commit


def changed_files(history, commit: CommitInfo) -> List[FileChange]:
    """Return the files ``commit`` added, modified or deleted."""
    return history.changed_files(commit.sha)


def changed_path_union(
    history,
    commits: Iterable[CommitInfo],
    failures: Optional[List[Tuple[CommitInfo, GitError]]] = None,
) -> List[str]:
    """Return every path touched by ``commits``, deduplicated and sorted.

    When ``failures`` is given, a commit whose files cannot be listed is
    recorded there with its error and skipped; otherwise the error
    propagates.
    """
    paths = set()
    for commit in commits:
        try:
            changes = history.changed_files(commit.sha)
        except GitError as exc:
            if failures is None:
                raise
            logger.debug("Cannot list files of %s: %s", commit.short_sha, exc)
            failures.append((commit, exc))
            continue
        paths.update(change.path for change in changes)
    return sorted(paths)
