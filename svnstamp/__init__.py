"""Public package surface for svnstamp.

Computes a reproducible build timestamp from Subversion working-copy metadata.
Most implementation lives in submodules under ``svnstamp``.
"""

from __future__ import annotations

import logging

from .aggregate import aggregate_latest_timestamp, latest_committed_date
from .errors import MetadataAccessError
from .ignore_filter import parse_ignore_filter
from .provider import SvnBuildTimestampProvider, format_build_qualifier, get_timestamp_provider
from .svn_info import MetadataEntry, iter_svn_info

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "MetadataAccessError",
    "MetadataEntry",
    "SvnBuildTimestampProvider",
    "aggregate_latest_timestamp",
    "format_build_qualifier",
    "get_timestamp_provider",
    "iter_svn_info",
    "latest_committed_date",
    "parse_ignore_filter",
]
