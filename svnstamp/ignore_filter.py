"""Ignore-filter parsing.

Turns the raw multi-line ``ignore`` option into a set of exact basenames.
"""

from __future__ import annotations

import re

_DELIMITER_RE = re.compile(r"[\n\r\f]")


def parse_ignore_filter(raw: str | None) -> frozenset[str]:
    """Split ``raw`` on newline, carriage return and form feed.

    Empty tokens are dropped; everything else is kept verbatim, so
    ``"pom.xml\\r\\nfoo.txt"`` yields ``{"pom.xml", "foo.txt"}`` and ``None``
    yields an empty set.
    """
    if raw is None:
        return frozenset()
    return frozenset(token for token in _DELIMITER_RE.split(raw) if token)
