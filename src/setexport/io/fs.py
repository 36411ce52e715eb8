"""
Filesystem helpers for setexport.io (file protocol baseline).

Responsibilities
- Provide a minimal stdlib-only abstraction for the file operations the export engine uses:
  directory creation, text/binary write handles, fsync, atomic renames, streaming copies and
  best-effort removal.
- Establish the finalize path: staging write -> fsync -> atomic rename.

Import DAG discipline
- stdlib-only.

Notes
- Atomicity via os.replace is guaranteed only when src and dst reside on the same filesystem;
  scratch, staging and final files therefore all live in the output directory.
- All helpers are synchronous; each export worker owns its files so no locking is needed.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO, TextIO

# Buffer size used when appending scratch bytes after the header.
_COPY_CHUNK = 1024 * 1024


def makedirs(path: str, exist_ok: bool = True) -> None:
    """
    Create directories recursively.

    Args:
        path (str): Directory path to create.
        exist_ok (bool): Do not error if the directory already exists.
    """
    os.makedirs(path, exist_ok=exist_ok)


def open_text_write(path: str) -> TextIO:
    """
    Open a file for text write suitable for the csv module.

    Notes:
        newline="" leaves line endings to the csv writer.
    """
    return open(path, "w", encoding="utf-8", newline="")


@contextmanager
def open_write(path: str) -> Iterator[BinaryIO]:
    """
    Open a file for binary write as a context manager.

    Args:
        path (str): Destination path to open in write-binary mode.

    Yields:
        BinaryIO: A writable handle supporting .flush() and .fileno().
    """
    fh = open(path, "wb")
    try:
        yield fh
    finally:
        fh.close()


def fsync_file(fh: BinaryIO) -> None:
    """Flush and fsync an open file handle."""
    fh.flush()
    os.fsync(fh.fileno())


def copy_into(src: str, dst_fh: BinaryIO) -> int:
    """
    Append the bytes of `src` verbatim to an open binary handle.

    Returns:
        int: Number of bytes copied.
    """
    with open(src, "rb") as fh:
        shutil.copyfileobj(fh, dst_fh, _COPY_CHUNK)
    return os.path.getsize(src)


def rename_atomic(src: str, dst: str) -> None:
    """
    Atomically rename src -> dst on the same filesystem.

    Notes:
        Uses os.replace, which replaces an existing dst (e.g., a previous export).
    """
    os.replace(src, dst)


def remove_quiet(path: str | None) -> None:
    """Best-effort removal of a scratch or staging file."""
    if not path:
        return
    try:
        os.remove(path)
    except OSError:
        pass


def listdir(path: str) -> list[str]:
    """
    List entries in a directory (non-recursive) as full paths.

    Returns:
        list[str]: Full paths of entries; [] if the directory does not exist.
    """
    try:
        names = os.listdir(path)
    except FileNotFoundError:
        return []
    return [os.path.join(path, name) for name in sorted(names)]
