"""Ignore-filter configuration lookup.

Reads the ``ignore`` option from a project's ``pyproject.toml`` and from the
per-user JSON defaults. All access is defensive: malformed or missing config
falls back to ``None``.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "svnstamp"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
PYPROJECT_FILENAME = "pyproject.toml"
TOOL_TABLE = "svnstamp"
IGNORE_KEY = "ignore"


def _coerce_ignore_value(value: object) -> str | None:
    """Normalize an ``ignore`` option to the raw newline-delimited form.

    Strings pass through verbatim and lists of strings are joined with
    newlines; anything else is treated as absent.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return "\n".join(value)
    return None


def load_config() -> dict[str, object]:
    """Load the per-user JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def load_default_ignore_filter() -> str | None:
    """Return the per-user default ignore filter, if any."""
    return _coerce_ignore_value(load_config().get(IGNORE_KEY))


def load_project_ignore_filter(project_root: Path) -> str | None:
    """Return ``[tool.svnstamp] ignore`` from ``project_root/pyproject.toml``."""
    pyproject_path = project_root / PYPROJECT_FILENAME
    try:
        with pyproject_path.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError:
        return None
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Ignoring unreadable %s: %s", pyproject_path, exc)
        return None

    tool = data.get("tool")
    if not isinstance(tool, dict):
        return None
    table = tool.get(TOOL_TABLE)
    if not isinstance(table, dict):
        return None
    return _coerce_ignore_value(table.get(IGNORE_KEY))


def resolve_ignore_filter(project_root: Path) -> str | None:
    """Project setting first, then the per-user default."""
    project_value = load_project_ignore_filter(project_root)
    if project_value is not None:
        return project_value
    return load_default_ignore_filter()
