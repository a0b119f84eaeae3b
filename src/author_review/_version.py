"""
Dynamic version generation for author_review.

The version is composed of:
- Major version: set manually in ``__init__.py``
- Minor version: highest ``v{major}.{minor}`` release tag
- Local part: short sha of the commit the tool is running from

Version information always comes from the tool's own source checkout,
never from the repository under review (which is usually the current
directory). Installed copies without a checkout get ``{major}.0.dev0``.
"""

import subprocess
from pathlib import Path
from typing import List, Optional


# src/author_review/_version.py -> checkout root
SOURCE_ROOT = Path(__file__).resolve().parent.parent.parent


def _git(args: List[str], repo_path: Path) -> Optional[str]:
    """Run git in ``repo_path``; return stdout or None on any failure."""
    if not (repo_path / ".git").exists():
        return None
    try:
        result = subprocess.run(
            ["git", "-C", str(repo_path)] + args,
            capture_output=True,
            text=True,
            check=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None
    return result.stdout


def get_git_commit_sha(repo_path: Path = SOURCE_ROOT) -> str:
    """Return the 7-character sha of HEAD, or ``'unknown'``."""
    out = _git(["rev-parse", "--short=7", "HEAD"], repo_path)
    return out.strip() if out else "unknown"


def get_minor_version_from_tags(base_version: str, repo_path: Path = SOURCE_ROOT) -> int:
    """Return the highest minor number among ``v{base_version}.N`` tags."""
    out = _git(["tag", "-l", f"v{base_version}.*"], repo_path)
    minors = []
    for tag in (out or "").split():
        parts = tag[1:].split(".")
        if len(parts) >= 2 and parts[1].isdigit():
            minors.append(int(parts[1]))
    return max(minors, default=0)


def generate_version(base_version: str, repo_path: Path = SOURCE_ROOT) -> str:
    """Return a PEP 440 version: ``{major}.{minor}.dev0[+g{sha}]``."""
    minor = get_minor_version_from_tags(base_version, repo_path)
    commit_sha = get_git_commit_sha(repo_path)
    if commit_sha == "unknown":
        return f"{base_version}.{minor}.dev0"
    return f"{base_version}.{minor}.dev0+g{commit_sha}"
