"""
Console output helpers.

All user-facing output goes through ``click.echo`` so colours are
stripped automatically when stdout is not a terminal.
"""

from __future__ import annotations

import re
from typing import Iterable, List

import click


_INSERTIONS = re.compile(r"\d+ insertions?(?:\(\+\))?")
_DELETIONS = re.compile(r"\d+ deletions?(?:\(-\))?")


def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}")


def print_warning(message: str, indent: int = 0):
    """Print a warning message."""
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}")


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def counter(index: int, total: int) -> str:
    return f"{index}/{total}"


def display_path(path: str) -> str:
    """Make a repository path printable.

    Paths that are not valid UTF-8 carry surrogate escapes; they are shown
    with replacement characters instead.
    """
    return path.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace")


def format_stat_line(line: str) -> str:
    """Reformat one ``git show --stat`` line for display.

    The file-name column is highlighted and marked, and insertion and
    deletion counts in the summary line are coloured green and red.
    """
    line = _INSERTIONS.sub(lambda m: click.style(m.group(0), fg="green"), line)
    line = _DELETIONS.sub(lambda m: click.style(m.group(0), fg="red"), line)
    if "|" in line:
        file_name, rest = line.split("|", 1)
        return f"📄 {click.style(file_name.strip(), fg='blue')} |{rest}"
    return line


def format_stat(lines: Iterable[str]) -> List[str]:
    return [format_stat_line(line) for line in lines]


def print_commit_header(sha: str, subject: str) -> None:
    """Print the banner shown before each commit in diff mode."""
    rule = "=" * 20
    click.echo("")
    click.secho(rule, bold=True)
    click.echo(f"📝 Commit: {click.style(sha, fg='cyan', bold=True)}")
    click.secho(rule, bold=True)
    click.echo(f"{click.style('Message:', bold=True)} {subject}")


def print_summary_box(title: str, items: List[str]):
    """Print a formatted summary box."""
    max_width = max(len(title), max(len(item) for item in items) if items else 0)
    box_width = min(max_width + 4, 60)

    click.echo(f"\n┌{'─' * box_width}┐")
    click.echo(f"│ {title.ljust(box_width - 2)}│")
    click.echo(f"├{'─' * box_width}┤")
    for item in items:
        click.echo(f"│ {item.ljust(box_width - 2)}│")
    click.echo(f"└{'─' * box_width}┘")
