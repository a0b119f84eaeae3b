"""
Command line interface for the author_review tool.

This module defines the ``main`` function used as the entry point of
the ``author-review`` command. It validates arguments, loads settings,
locates the repository, asks for the review mode, enumerates the
author's commits and hands them to the diff or snapshot presenter
inside a scratch area that is removed on every exit path.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

import click

from author_review import __version__
from author_review.config.loader import ConfigError, ReviewSettings, load_config
from author_review.content.classifier import make_classifier
from author_review.content.materializer import ContentMaterializer
from author_review.review.display import (
    print_error,
    print_info,
    print_success,
    print_summary_box,
    print_warning,
)
from author_review.review.enumerator import enumerate_commits
from author_review.review.presenters import present_diffs, present_snapshot
from author_review.scratch import ScratchArea
from author_review.vcs.git_client import GitClient, GitError
from author_review.viewer.editor import EditorViewer, ViewerError

# Module-level logger with a null handler; when the CLI configures
# logging, root handlers are added and messages propagate.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_USAGE = 1
EXIT_GENERIC_ERROR = 1
EXIT_NO_REPO = 3
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_VIEWER_MISSING = 7

MODE_DIFF = 1
MODE_SNAPSHOT = 2

USAGE = 'Usage: {prog} <commit-sha> "<author-name-or-email>"'


class ProgressIndicator:
    """Simple progress indicator for user feedback."""

    def __init__(self, message: str):
        self.message = message
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        click.echo(f"→ {self.message}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            elapsed = time.time() - self.start_time
            click.echo(f"  ✓ Done ({elapsed:.1f}s)")
        return False


def prompt_for_mode(default: int = MODE_DIFF) -> int:
    """Ask which review mode to run; a blank answer selects ``default``."""
    click.echo(click.style("Choose an option:", fg="cyan"))
    click.echo("1) View file diffs" + (" (default)" if default == MODE_DIFF else ""))
    click.echo(
        "2) Open modified files (latest version only)"
        + (" (default)" if default == MODE_SNAPSHOT else "")
    )
    choice = click.prompt(
        "Enter 1 or 2",
        type=click.Choice(["1", "2"]),
        default=str(default),
        show_choices=False,
        show_default=False,
    )
    return int(choice)


def build_viewer(settings: ReviewSettings, override: Optional[str] = None) -> EditorViewer:
    viewer = EditorViewer.from_settings(settings)
    if override:
        viewer.command = override
    return viewer


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("start_ref", required=False)
@click.argument("author", required=False)
@click.option(
    "--mode",
    type=click.Choice(["1", "2"]),
    help="1 = per-commit diffs, 2 = latest version of touched files. Skips the prompt.",
)
@click.option(
    "--repo",
    type=click.Path(file_okay=False, path_type=Path),
    help="Path inside the repository to review (default: current directory).",
)
@click.option("--viewer", "viewer_cmd", help="Viewer command to use instead of the configured one.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Settings file (default: ~/.author_review/config.json).",
)
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="author-review")
def main(
    start_ref: Optional[str],
    author: Optional[str],
    mode: Optional[str],
    repo: Optional[Path],
    viewer_cmd: Optional[str],
    config_path: Optional[Path],
    verbose: bool,
) -> None:
    """Review the commits AUTHOR made after START_REF, one file at a time.

    Diff mode opens each changed file of each commit as a before/after
    diff. Snapshot mode opens the current version of every file the
    author touched.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )

    ctx = click.get_current_context()

    if not start_ref or not author:
        click.echo(USAGE.format(prog=ctx.info_name or "author-review"))
        raise click.exceptions.Exit(EXIT_USAGE)

    try:
        try:
            settings = load_config(config_path)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        repo_root = GitClient.find_repo_root(repo or Path.cwd())
        if repo_root is None:
            print_error("No Git repository found in the given directory or its parents.")
            raise click.exceptions.Exit(EXIT_NO_REPO)
        logger.debug("Repository root: %s", repo_root)
        client = GitClient(repo_root)

        try:
            client.verify_ref(start_ref)
        except GitError as exc:
            print_error(f"Git error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)

        selected = int(mode) if mode else prompt_for_mode(settings.default_mode)

        try:
            with ProgressIndicator(f"Collecting commits by '{author}' after {start_ref}"):
                commits = list(
                    enumerate_commits(
                        client, start_ref, author, allow_coauthored=settings.allow_coauthored
                    )
                )
        except GitError as exc:
            print_error(f"Git error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)

        if not commits:
            print_warning(
                click.style(f"No commits found by '{author}' after {start_ref}", fg="yellow")
            )
            raise click.exceptions.Exit(EXIT_SUCCESS)

        print_success(f"Found {len(commits)} commit{'s' if len(commits) != 1 else ''}")

        viewer = build_viewer(settings, viewer_cmd)
        try:
            viewer.ensure_available()
        except ViewerError as exc:
            print_error(str(exc))
            print_info("Set 'viewer' in the settings file or pass --viewer", indent=1)
            raise click.exceptions.Exit(EXIT_VIEWER_MISSING)

        classifier = make_classifier(settings.classifier)
        with ScratchArea() as scratch:
            materializer = ContentMaterializer(client, scratch, classifier)
            if selected == MODE_SNAPSHOT:
                click.echo(click.style(
                    f"Collecting final versions of files changed by '{author}' after {start_ref}...",
                    fg="cyan",
                ))
                try:
                    summary = present_snapshot(commits, client, materializer, viewer)
                except GitError as exc:
                    print_error(f"Git error: {exc}")
                    raise click.exceptions.Exit(EXIT_VCS_FAILURE)
            else:
                click.echo(click.style(
                    f"Processing diffs by '{author}' after {start_ref}...", fg="cyan"
                ))
                summary = present_diffs(commits, client, materializer, viewer)

        print_summary_box("Summary", summary.lines())
        raise click.exceptions.Exit(EXIT_SUCCESS)

    except (click.exceptions.Exit, click.exceptions.Abort):
        # Click's own control-flow exceptions; re-raise to let Click handle them
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)
