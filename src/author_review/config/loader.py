"""
Configuration loader for author_review.

Settings are read from an optional JSON file named ``config.json`` in the
``~/.author_review/`` directory, or from an explicit path given on the
command line. Every key is optional; missing keys take their defaults.
The result is a frozen :class:`ReviewSettings` that is passed explicitly
to the components that need it.

If the configuration file is malformed or a key has the wrong type or
value, a :class:`ConfigError` is raised.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings. Messages appear
# once the CLI configures logging.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


VIEWER_ENV_VAR = "AUTHOR_REVIEW_VIEWER"
CLASSIFIERS = ("auto", "file", "heuristic")
MODES = (1, 2)


class ConfigError(Exception):
    """Raised when the configuration file is unreadable or invalid."""

    pass


@dataclass(frozen=True)
class ReviewSettings:
    """Validated settings for one run.

    Attributes
    ----------
    viewer : str
        Viewer executable (name on ``PATH`` or a path).
    viewer_args : Tuple[str, ...]
        Arguments appended when opening a file or a diff. They must make
        the viewer block until the window is closed.
    diff_args : Tuple[str, ...]
        Arguments that switch the viewer into two-file diff mode.
    default_mode : int
        Mode used when the prompt is answered with a blank line.
    classifier : str
        Binary classifier: ``auto``, ``file`` or ``heuristic``.
    allow_coauthored : bool
        Keep commits that carry ``Co-authored-by`` trailers.
    """

    viewer: str = "code"
    viewer_args: Tuple[str, ...] = ("--new-window", "--wait")
    diff_args: Tuple[str, ...] = ("--diff",)
    default_mode: int = 1
    classifier: str = "auto"
    allow_coauthored: bool = False
    source: Optional[Path] = field(default=None, compare=False)


def _get_config_directory() -> Path:
    """Return the per-user configuration directory, ``~/.author_review/``."""
    return Path.home() / ".author_review"


def _string_list(data: Dict[str, Any], key: str) -> Optional[Tuple[str, ...]]:
    if key not in data:
        return None
    value = data[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return tuple(value)


def load_config(config_path: Optional[Path] = None) -> ReviewSettings:
    """Load the settings file and return validated :class:`ReviewSettings`.

    Args:
        config_path: Explicit configuration file. It must exist. When
                     omitted, ``~/.author_review/config.json`` is used if
                     present and the defaults otherwise.

    The ``AUTHOR_REVIEW_VIEWER`` environment variable, when set, overrides
    the ``viewer`` key.

    Raises:
        ConfigError: If the file is missing (explicit path only),
                     malformed, or contains invalid values.
    """
    explicit = config_path is not None
    if config_path is None:
        config_path = _get_config_directory() / "config.json"

    data: Dict[str, Any] = {}
    if config_path.exists():
        try:
            content = config_path.read_text(encoding="utf-8")
            data = json.loads(content)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Failed to read or parse configuration file: %s", exc)
            raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path.name} must contain a JSON object")
    elif explicit:
        logger.error("Configuration file '%s' does not exist", config_path)
        raise ConfigError(f"Missing configuration file: {config_path}")
    else:
        logger.debug("No configuration file at %s; using defaults", config_path)

    settings = ReviewSettings(source=config_path if data else None)
    overrides: Dict[str, Any] = {}

    if "viewer" in data:
        if not isinstance(data["viewer"], str) or not data["viewer"].strip():
            raise ConfigError("'viewer' must be a non-empty string")
        overrides["viewer"] = data["viewer"].strip()

    viewer_args = _string_list(data, "viewer_args")
    if viewer_args is not None:
        overrides["viewer_args"] = viewer_args
    diff_args = _string_list(data, "diff_args")
    if diff_args is not None:
        overrides["diff_args"] = diff_args

    if "default_mode" in data:
        mode = data["default_mode"]
        # bool is a subclass of int; reject it explicitly
        if isinstance(mode, bool) or mode not in MODES:
            raise ConfigError("'default_mode' must be 1 or 2")
        overrides["default_mode"] = mode

    if "classifier" in data:
        if data["classifier"] not in CLASSIFIERS:
            raise ConfigError(f"'classifier' must be one of: {', '.join(CLASSIFIERS)}")
        overrides["classifier"] = data["classifier"]

    if "allow_coauthored" in data:
        if not isinstance(data["allow_coauthored"], bool):
            raise ConfigError("'allow_coauthored' must be a boolean")
        overrides["allow_coauthored"] = data["allow_coauthored"]

    env_viewer = os.environ.get(VIEWER_ENV_VAR, "").strip()
    if env_viewer:
        logger.debug("Viewer overridden by %s: %s", VIEWER_ENV_VAR, env_viewer)
        overrides["viewer"] = env_viewer

    settings = replace(settings, **overrides)
    logger.debug("Loaded settings: %s", settings)
    return settings
