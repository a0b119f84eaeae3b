"""
Version control system (VCS) integration.

Contains the Git client the history walker uses to list an author's
commits, the files each commit changed, and file content at any
revision.
"""

from .git_client import CommitInfo, FileChange, GitClient, GitError  # noqa: F401
