"""
External viewer integration.

See :mod:`author_review.viewer.editor`.
"""

from .editor import EditorViewer, ViewerError  # noqa: F401
