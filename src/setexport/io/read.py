"""
Read utilities for export files.

Overview
- read_export(): parse one "<namespace>.<set>.csv" into a Polars DataFrame.
- read_exports(): read every export file in an output directory, keyed by PartitionId.

Import caveat handled here
- Export headers end with a trailing comma, which naive readers see as an extra unnamed
  column. It is dropped.
- Rows written before later columns were discovered are shorter than the header. Naive
  readers may reject or misalign them; read_export() pads them with nulls on the right,
  which is correct because columns are only ever appended.

Notes
- All columns are returned as Utf8; the export does not carry type information.
- Empty cells become null unless empty_as_null=False.
"""

from __future__ import annotations

import csv

import polars as pl

from setexport.core.typing import PartitionId

from .errors import IoError
from .fs import listdir
from .paths import partition_from_path


def _header_columns(row: list[str]) -> list[str]:
    cols = list(row)
    if cols and cols[-1] == "":
        cols.pop()
    return cols


def read_export(path: str, *, empty_as_null: bool = True) -> pl.DataFrame:
    """
    Load an export file, padding short rows to the header width.

    Args:
        path (str): Path to an export CSV.
        empty_as_null (bool): Map empty cells to null (default True).

    Returns:
        pl.DataFrame: One Utf8 column per header column, one row per data line.

    Raises:
        IoError: If a data line has more fields than the header.
    """
    with open(path, encoding="utf-8", newline="") as fh:
        reader = csv.reader(fh)
        try:
            columns = _header_columns(next(reader))
        except StopIteration:
            return pl.DataFrame()
        width = len(columns)
        data: list[list[str | None]] = [[] for _ in columns]
        for lineno, row in enumerate(reader, start=2):
            if len(row) > width:
                raise IoError(
                    f"{path}:{lineno}: {len(row)} fields but header has {width} columns"
                )
            for i in range(width):
                cell: str | None = row[i] if i < len(row) else None
                if empty_as_null and cell == "":
                    cell = None
                data[i].append(cell)
    return pl.DataFrame(
        {name: pl.Series(name, values, dtype=pl.Utf8) for name, values in zip(columns, data)}
    )


def read_exports(output_dir: str, *, empty_as_null: bool = True) -> dict[PartitionId, pl.DataFrame]:
    """
    Read every export file found directly under output_dir.

    Returns:
        dict[PartitionId, pl.DataFrame]: Frames keyed by partition, in file-name order.
    """
    out: dict[PartitionId, pl.DataFrame] = {}
    for path in listdir(output_dir):
        pid = partition_from_path(path)
        if pid is None:
            continue
        out[pid] = read_export(path, empty_as_null=empty_as_null)
    return out
