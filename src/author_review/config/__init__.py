"""
Configuration loading for author_review.

Provides a loader for the optional JSON settings file. See
:mod:`author_review.config.loader` for implementation details.
"""

from .loader import ConfigError, ReviewSettings, load_config  # noqa: F401
