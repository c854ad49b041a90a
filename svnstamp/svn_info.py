"""Subversion working-copy metadata traversal.

Streams ``svn info --depth infinity --xml`` and yields one ``MetadataEntry``
per versioned file or directory, the root included. The client process is
scoped to the traversal and always reaped, even when iteration stops early.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import IO

from .errors import MetadataAccessError

logger = logging.getLogger(__name__)

SVN_EXECUTABLE = "svn"


@dataclass(frozen=True)
class MetadataEntry:
    """One versioned entry reported by the working copy.

    ``raw_committed_date`` holds the date text as reported by the client and is
    only parsed when ``committed_date`` is read, so entries that are filtered
    out by name never have their dates inspected. Both are ``None`` when the
    entry has no commit yet, for example a file scheduled for addition.
    """

    path: Path
    kind: str
    committed_revision: int | None = None
    raw_committed_date: str | None = None

    @property
    def basename(self) -> str:
        return self.path.name

    @property
    def committed_date(self) -> datetime | None:
        """Parsed commit date; an unparseable value raises ``MetadataAccessError``."""
        if self.raw_committed_date is None:
            return None
        try:
            return _parse_commit_date(self.raw_committed_date)
        except ValueError as exc:
            raise MetadataAccessError(
                f"Invalid commit date {self.raw_committed_date!r} for {self.path}"
            ) from exc


def _parse_commit_date(text: str) -> datetime:
    """Parse an svn commit date such as ``2012-03-04T05:06:07.123456Z``."""
    value = text.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _parse_revision(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        revision = int(raw)
    except ValueError:
        return None
    return revision if revision >= 0 else None


def _entry_from_element(element: ET.Element, base: Path | None) -> MetadataEntry:
    raw_path = element.get("path", "")
    path = Path(raw_path)
    if base is not None and not path.is_absolute():
        path = base / path

    revision: int | None = None
    raw_date: str | None = None
    commit = element.find("commit")
    if commit is not None:
        revision = _parse_revision(commit.get("revision"))
        date_text = commit.findtext("date")
        if date_text and date_text.strip():
            raw_date = date_text.strip()

    return MetadataEntry(
        path=path,
        kind=element.get("kind", "unknown"),
        committed_revision=revision,
        raw_committed_date=raw_date,
    )


def iter_info_entries(stream: IO[bytes], base: Path | None = None) -> Iterator[MetadataEntry]:
    """Incrementally parse ``svn info --xml`` output from ``stream``.

    Relative ``path`` attributes are resolved against ``base``. Malformed XML
    raises ``MetadataAccessError``.
    """
    document: ET.Element | None = None
    try:
        for event, element in ET.iterparse(stream, events=("start", "end")):
            if document is None:
                document = element
            if event != "end" or element.tag != "entry":
                continue
            entry = _entry_from_element(element, base)
            # Drop parsed entries from the <info> root so memory stays flat.
            document.clear()
            yield entry
    except ET.ParseError as exc:
        raise MetadataAccessError(f"Malformed svn info output: {exc}") from exc


def _client_env() -> dict[str, str]:
    return {**os.environ, "LC_ALL": "C"}


def _read_stderr(stderr_file: IO[bytes]) -> str:
    stderr_file.seek(0)
    return stderr_file.read().decode("utf-8", errors="replace").strip()


def iter_svn_info(root: Path) -> Iterator[MetadataEntry]:
    """Yield metadata for every versioned entry under ``root``, recursively.

    The generator is single-pass. Failures of the whole traversal (not a
    working copy, corrupted store, missing client, unparseable output) raise
    ``MetadataAccessError`` once detected, which may be after some entries
    have already been yielded; consumers must discard partial results.

    ``root`` is made absolute without resolving symlinks, so the root entry
    keeps the basename the caller used even for a symlinked checkout.
    """
    root = root.absolute()
    command = [
        SVN_EXECUTABLE,
        "info",
        "--depth",
        "infinity",
        "--xml",
        "--non-interactive",
        str(root),
    ]
    logger.debug("Reading working-copy metadata under %s", root)

    with tempfile.TemporaryFile() as stderr_file:
        try:
            proc = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=stderr_file,
                env=_client_env(),
            )
        except OSError as exc:
            raise MetadataAccessError(f"Failed to run {SVN_EXECUTABLE!r} for {root}: {exc}", root) from exc

        count = 0
        completed = False
        parse_error: MetadataAccessError | None = None
        with proc:
            try:
                for entry in iter_info_entries(proc.stdout, base=root):
                    count += 1
                    yield entry
                completed = True
            except MetadataAccessError as exc:
                parse_error = exc
                completed = True
            finally:
                # Abandoned mid-stream: stop the client before the pipe is closed.
                if not completed and proc.poll() is None:
                    proc.kill()

        if proc.returncode != 0:
            detail = _read_stderr(stderr_file) or f"svn exited with status {proc.returncode}"
            cause: BaseException = parse_error or subprocess.CalledProcessError(
                proc.returncode, command, stderr=detail
            )
            raise MetadataAccessError(f"Failed to get info for {root}: {detail}", root) from cause
        if parse_error is not None:
            raise MetadataAccessError(f"Failed to get info for {root}: {parse_error}", root) from parse_error

    logger.debug("Read %d working-copy entries under %s", count, root)
