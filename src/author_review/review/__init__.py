"""
History walking and presentation.

:mod:`author_review.review.enumerator` finds the commits to review and
the files they touched; :mod:`author_review.review.presenters` hands
them to the viewer in diff or snapshot mode.
"""

from .enumerator import changed_files, changed_path_union, enumerate_commits  # noqa: F401
from .presenters import ReviewSummary, present_diffs, present_snapshot  # noqa: F401
