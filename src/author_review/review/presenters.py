"""
Diff-mode and snapshot-mode presenters.

Both presenters walk their input once, in order, and hand one file (or
one before/after pair) at a time to the viewer, blocking until it is
closed. A problem with a single file (binary content, a deleted path, a
failed lookup or a viewer error) skips that file with a notice; it never
stops the walk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Tuple

import click

from author_review.review.display import (
    counter,
    display_path,
    format_stat,
    print_commit_header,
    print_info,
    print_warning,
)
from author_review.review.enumerator import changed_files, changed_path_union
from author_review.vcs.git_client import CommitInfo, GitError
from author_review.viewer.editor import ViewerError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


@dataclass
class ReviewSummary:
    """Counters reported at the end of a run."""

    commits: int = 0
    opened: int = 0
    skipped_binary: int = 0
    skipped_deleted: int = 0
    failed: int = 0

    def lines(self) -> List[str]:
        items = [
            f"Commits reviewed: {self.commits}",
            f"Opened in viewer: {self.opened}",
        ]
        if self.skipped_binary:
            items.append(f"Skipped (binary): {self.skipped_binary}")
        if self.skipped_deleted:
            items.append(f"Skipped (deleted): {self.skipped_deleted}")
        if self.failed:
            items.append(f"Failed: {self.failed}")
        return items


def present_diffs(
    commits: Iterable[CommitInfo],
    history,
    materializer,
    viewer,
) -> ReviewSummary:
    """Show every file of every commit as a parent/commit diff.

    Parameters
    ----------
    commits : Iterable[CommitInfo]
        Matching commits, oldest first.
    history : object
        History store (``commit_stat``, ``changed_files``).
    materializer : ContentMaterializer
        Stages revision content into the scratch area.
    viewer : EditorViewer
        Blocking viewer; ``diff(left, right)`` is called per file.
    """
    summary = ReviewSummary()
    for commit in commits:
        summary.commits += 1
        print_commit_header(commit.sha, commit.subject)

        try:
            for line in format_stat(history.commit_stat(commit.sha)):
                click.echo(line)
        except GitError as exc:
            print_warning(f"Could not read stat summary for {commit.short_sha}: {exc}")
        click.echo("")

        try:
            changes = changed_files(history, commit)
        except GitError as exc:
            print_warning(f"Could not list files changed by {commit.short_sha}: {exc}")
            summary.failed += 1
            continue

        total = len(changes)
        for index, change in enumerate(changes, start=1):
            position = counter(index, total)
            shown = display_path(change.path)
            try:
                before = materializer.materialize(commit.parent, change.path, "parent")
                if change.deleted:
                    after = materializer.empty(change.path, "commit")
                    print_warning(
                        f"❌ File deleted: {click.style(shown, fg='red')}; "
                        f"showing removal diff ({position})"
                    )
                else:
                    after = materializer.materialize(commit.sha, change.path, "commit")
            except (GitError, OSError) as exc:
                print_warning(f"Could not read {shown}: {exc} ({position})")
                summary.failed += 1
                continue

            # A path the commit did not delete must exist at the commit
            if not change.deleted and not after.exists:
                print_warning(f"Could not read {shown} at {commit.short_sha} ({position})")
                summary.failed += 1
                continue

            if before.is_binary or after.is_binary:
                print_warning(
                    f"Skipping binary file: {click.style(shown, fg='yellow')} ({position})"
                )
                summary.skipped_binary += 1
                continue

            click.echo(f"🔍 Opening diff for {click.style(shown, fg='blue')}... ({position})")
            try:
                viewer.diff(before.scratch_path, after.scratch_path)
            except ViewerError as exc:
                print_warning(f"Viewer failed for {shown}: {exc}")
                summary.failed += 1
                continue
            summary.opened += 1
    return summary


def present_snapshot(
    commits: Iterable[CommitInfo],
    history,
    materializer,
    viewer,
    tip: str = "HEAD",
) -> ReviewSummary:
    """Open the tip version of every file touched by ``commits``.

    A path is opened if and only if it exists at ``tip``; paths deleted
    and later re-added are therefore opened, paths deleted for good are
    skipped. A commit whose changed files cannot be listed is reported
    and left out of the union.
    """
    commits = list(commits)
    summary = ReviewSummary(commits=len(commits))
    failures: List[Tuple[CommitInfo, GitError]] = []
    paths = changed_path_union(history, commits, failures)
    for commit, exc in failures:
        print_warning(f"Could not list files changed by {commit.short_sha}: {exc}")
        summary.failed += 1
    print_info(f"Found {len(paths)} unique files.")

    tip_paths = history.tree_paths(tip)
    total = len(paths)
    for index, path in enumerate(paths, start=1):
        position = counter(index, total)
        shown = display_path(path)
        if path not in tip_paths:
            print_warning(f"❌ Skipping deleted file: {click.style(f'{position} - {shown}', fg='red')}")
            summary.skipped_deleted += 1
            continue

        try:
            blob = materializer.materialize(tip, path)
        except (GitError, OSError) as exc:
            print_warning(f"Could not read {shown}: {exc} ({position})")
            summary.failed += 1
            continue

        # Listed in the tip tree, so missing content is a failed lookup
        if not blob.exists:
            print_warning(f"Could not read {shown} at {tip} ({position})")
            summary.failed += 1
            continue

        if blob.is_binary:
            print_warning(f"Skipping binary file: {click.style(f'{position} - {shown}', fg='yellow')}")
            summary.skipped_binary += 1
            continue

        click.echo(f"📂 Opening: {click.style(f'{position} - {shown}', fg='blue')}")
        try:
            viewer.open(blob.scratch_path)
        except ViewerError as exc:
            print_warning(f"Viewer failed for {shown}: {exc}")
            summary.failed += 1
            continue
        summary.opened += 1
    return summary
