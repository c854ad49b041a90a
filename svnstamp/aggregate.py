"""Latest-committed-date aggregation over working-copy metadata.

``latest_committed_date`` is a pure fold over any entry sequence.
``aggregate_latest_timestamp`` feeds it the full recursive traversal of a
working copy.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from functools import reduce
from pathlib import Path

from .svn_info import MetadataEntry, iter_svn_info

logger = logging.getLogger(__name__)


def _later(current: datetime | None, candidate: datetime | None) -> datetime | None:
    """Return ``candidate`` when it is strictly later than ``current``."""
    if candidate is None:
        return current
    if current is None or candidate > current:
        return candidate
    return current


def latest_committed_date(
    entries: Iterable[MetadataEntry],
    ignore: Iterable[str] = frozenset(),
) -> datetime | None:
    """Return the maximum committed date of entries not named in ``ignore``.

    Ignored basenames are skipped before their date is looked at, and entries
    without a committed date never participate. Returns ``None`` when no entry
    qualifies; that means "unknown", not the epoch.
    """
    ignored = ignore if isinstance(ignore, (set, frozenset)) else frozenset(ignore)
    dates = (entry.committed_date for entry in entries if entry.basename not in ignored)
    return reduce(_later, dates, None)


def aggregate_latest_timestamp(root: Path, ignore: Iterable[str] = frozenset()) -> datetime | None:
    """Return the most recent committed date of any versioned entry under ``root``.

    Raises ``MetadataAccessError`` when the working-copy metadata cannot be
    read; no partial result is returned in that case.
    """
    latest = latest_committed_date(iter_svn_info(root), ignore)
    logger.debug("Latest committed date under %s: %s", root, latest)
    return latest
