"""Build-timestamp provider glue.

Wires the ignore-filter parser and the aggregator behind a provider object
that build tooling looks up by hint. Also renders timestamps as build
qualifiers.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from .aggregate import aggregate_latest_timestamp
from .config import resolve_ignore_filter
from .ignore_filter import parse_ignore_filter

logger = logging.getLogger(__name__)

DEFAULT_QUALIFIER_FORMAT = "%Y%m%d%H%M"


class BuildTimestampProvider(Protocol):
    def get_timestamp(self, project_root: Path, ignore_filter: str | None = None) -> datetime | None:
        """Return the build timestamp for ``project_root``, or ``None`` when unknown."""
        ...


class SvnBuildTimestampProvider:
    """Timestamp of the most recent commit touching anything under a project root.

    ``ignore_filter`` holds newline-delimited basenames to leave out, such as
    ``"pom.xml"``. When it is ``None`` and ``use_config`` is true, the value is
    looked up from ``[tool.svnstamp] ignore`` in the project's
    ``pyproject.toml`` and then from the per-user defaults.
    """

    hint = "svn"

    def __init__(self, use_config: bool = True) -> None:
        self.use_config = use_config

    def get_timestamp(self, project_root: Path, ignore_filter: str | None = None) -> datetime | None:
        if ignore_filter is None and self.use_config:
            ignore_filter = resolve_ignore_filter(project_root)
        ignore = parse_ignore_filter(ignore_filter)
        timestamp = aggregate_latest_timestamp(project_root, ignore)
        if timestamp is None:
            logger.info("No committed entries under %s; build timestamp unknown", project_root)
        else:
            logger.debug("Build timestamp for %s is %s", project_root, timestamp.isoformat())
        return timestamp


TIMESTAMP_PROVIDERS: dict[str, type[BuildTimestampProvider]] = {
    SvnBuildTimestampProvider.hint: SvnBuildTimestampProvider,
}


def get_timestamp_provider(hint: str) -> BuildTimestampProvider:
    """Instantiate the provider registered under ``hint``."""
    try:
        provider_cls = TIMESTAMP_PROVIDERS[hint]
    except KeyError:
        known = ", ".join(sorted(TIMESTAMP_PROVIDERS))
        raise KeyError(f"unknown timestamp provider {hint!r} (known: {known})") from None
    return provider_cls()


def format_build_qualifier(timestamp: datetime, pattern: str = DEFAULT_QUALIFIER_FORMAT) -> str:
    """Render ``timestamp`` in UTC; naive values are taken to be UTC already."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc).strftime(pattern)
