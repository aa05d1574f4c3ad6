"""Zip archive reading for distribution and update archives."""

from __future__ import annotations

import logging
import zipfile
import zlib
from collections.abc import Iterator
from pathlib import Path

from update_creator_core.distribution.models import ArchiveEntry, ArchiveReadError

logger = logging.getLogger(__name__)

# Everything zipfile raises for corrupt, truncated or unsupported members
READ_ERRORS = (zipfile.BadZipFile, zlib.error, OSError, EOFError, RuntimeError, NotImplementedError)


def split_member_name(name: str) -> tuple[str, str]:
    """Split a zip member name into (top-level directory, relative path).

    The relative path drops the top-level segment and any trailing slash.
    A member with no slash sits at the distribution root and gets an empty
    relative path.
    """
    name = name.rstrip("/")
    if "/" not in name:
        return name, ""
    top, rel = name.split("/", 1)
    return top, rel


def is_distribution_archive(path: str | Path) -> bool:
    """Check that *path* is an existing, readable zip file."""
    p = Path(path)
    return p.is_file() and zipfile.is_zipfile(p)


def iter_entries(path: str | Path) -> Iterator[ArchiveEntry]:
    """Yield every member of the zip at *path* with its content drained.

    Each member stream is closed before the next one is opened, so at most
    one member handle is open at a time.
    """
    path = Path(path)
    try:
        with zipfile.ZipFile(path) as zf:
            for info in zf.infolist():
                if info.is_dir():
                    yield ArchiveEntry(path=info.filename, is_directory=True)
                    continue
                with zf.open(info) as fh:
                    data = fh.read()
                yield ArchiveEntry(path=info.filename, is_directory=False, content=data)
    except READ_ERRORS as e:
        raise ArchiveReadError(path, e) from e


def read_member(path: str | Path, member: str) -> bytes | None:
    """Return the bytes of a single member, or None if the archive lacks it."""
    path = Path(path)
    try:
        with zipfile.ZipFile(path) as zf:
            try:
                info = zf.getinfo(member)
            except KeyError:
                logger.debug("%s not found in %s", member, path)
                return None
            with zf.open(info) as fh:
                return fh.read()
    except READ_ERRORS as e:
        raise ArchiveReadError(path, e) from e
