"""
Content staging and binary detection.

See :mod:`author_review.content.materializer` and
:mod:`author_review.content.classifier`.
"""

from .classifier import FileCommandClassifier, NulByteClassifier, make_classifier  # noqa: F401
from .materializer import ContentBlob, ContentMaterializer  # noqa: F401
