"""Exception types raised by svnstamp."""

from __future__ import annotations

from pathlib import Path


class MetadataAccessError(Exception):
    """Working-copy metadata could not be read for a whole traversal.

    Raised when the root is not a working copy, the ``.svn`` store is
    corrupted, the ``svn`` client cannot be started, or its output cannot be
    parsed. The underlying cause is chained as ``__cause__``.
    """

    def __init__(self, message: str, root: Path | None = None) -> None:
        super().__init__(message)
        self.root = root
