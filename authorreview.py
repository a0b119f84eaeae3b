#!/usr/bin/env python
"""
Thin wrapper script to invoke the author_review CLI.

Running ``python authorreview.py`` is equivalent to running the
``author-review`` console script installed via ``pyproject.toml``.
"""

from author_review.cli import main


if __name__ == "__main__":
    main(prog_name="author-review")
