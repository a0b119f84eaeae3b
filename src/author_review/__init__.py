"""
Top-level package for author_review.

This package exposes the main CLI entry point via the
``author_review.cli`` module.
"""

__all__ = ["__version__", "__base_version__"]

# Major version - controlled manually
__base_version__ = "0"

try:
    from author_review._version import generate_version
    __version__ = generate_version(__base_version__)
except Exception:
    # Fallback if version generation fails
    __version__ = f"{__base_version__}.0.dev0"
