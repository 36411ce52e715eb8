"""
Row and header writers for partition export files.

Overview
- RowWriter streams positional rows to a scratch file with the stdlib csv writer
  (quoting/escaping of a single row is delegated entirely to csv).
- finalize_with_header() writes the header line, appends the scratch bytes verbatim, fsyncs,
  and atomically renames onto the final path, then removes the scratch file.

Header framing
- Column names joined by "," followed by a trailing "," and "\\n". Names are written as-is
  (no quoting), matching the files the exporter has always produced.

Notes
- Rows are never padded to the final header width; a row written before a column was
  discovered stays shorter than the header (see setexport.io.read for a padding reader).
- Single-writer: each partition owns its scratch, staging and final paths.
"""

from __future__ import annotations

import csv
from collections.abc import Sequence
from typing import Any

from setexport.core.values import encode_value

from .errors import IoWriteError
from .fs import copy_into, fsync_file, open_text_write, open_write, remove_quiet, rename_atomic

LINE_TERMINATOR = "\n"


def format_header(columns: Sequence[str]) -> bytes:
    """
    Render the header line for a final column order.

    Examples:
        >>> format_header(["a", "b", "c"])
        b'a,b,c,\\n'
        >>> format_header([])
        b'\\n'
    """
    return "".join(f"{name}," for name in columns).encode("utf-8") + LINE_TERMINATOR.encode()


class RowWriter:
    """
    Streaming CSV writer for scratch rows.

    Values are rendered through setexport.core.values.encode_value, so unsupported
    value kinds raise UnsupportedValueError before anything is written for that row.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._fh = open_text_write(path)
        self._writer = csv.writer(self._fh, lineterminator=LINE_TERMINATOR)
        self.rows = 0

    def write_row(self, values: Sequence[Any]) -> None:
        cells = [encode_value(v) for v in values]
        self._writer.writerow(cells)
        self.rows += 1

    def close(self) -> None:
        if not self._fh.closed:
            self._fh.close()

    def __enter__(self) -> RowWriter:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def finalize_with_header(
    scratch_path: str,
    staging_path: str,
    final_path: str,
    columns: Sequence[str],
) -> int:
    """
    Produce the final export file: header line followed by the scratch bytes.

    Args:
        scratch_path (str): Closed scratch file holding header-less rows.
        staging_path (str): Temporary path in the same directory as final_path.
        final_path (str): Destination "<namespace>.<set>.csv".
        columns (Sequence[str]): Final registry snapshot.

    Returns:
        int: Size of the final file in bytes.

    Raises:
        IoWriteError: If writing, fsync or the atomic rename fails. The staging file is
            removed; the scratch file is left for the caller to clean up.
    """
    header = format_header(columns)
    try:
        with open_write(staging_path) as fh:
            fh.write(header)
            copied = copy_into(scratch_path, fh)
            fsync_file(fh)
        rename_atomic(staging_path, final_path)
    except OSError as exc:
        remove_quiet(staging_path)
        raise IoWriteError(f"failed to write {final_path}: {exc}") from exc
    remove_quiet(scratch_path)
    return len(header) + copied
