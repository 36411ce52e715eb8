from __future__ import annotations

import os

import pytest

from setexport.core.errors import UnsupportedValueError
from setexport.io.errors import IoWriteError
from setexport.io.write import RowWriter, finalize_with_header, format_header


def test_format_header_has_trailing_comma() -> None:
    assert format_header(["_generation", "_expiry", "a"]) == b"_generation,_expiry,a,\n"


def test_row_writer_quotes_and_leaves_short_rows_short(tmp_path, read_lines) -> None:
    path = tmp_path / "rows.tmp"
    with RowWriter(str(path)) as w:
        w.write_row(["v1", "v2"])
        w.write_row(["v1", None, "v3"])
        w.write_row(["has,comma", 'has "quote"', b"\x00"])
    assert w.rows == 3
    assert read_lines(path) == [
        "v1,v2",
        "v1,,v3",
        '"has,comma","has ""quote""",AA==',
    ]


def test_row_writer_rejects_unsupported_values(tmp_path) -> None:
    with RowWriter(str(tmp_path / "rows.tmp")) as w:
        with pytest.raises(UnsupportedValueError):
            w.write_row([object()])
        assert w.rows == 0


def test_finalize_prefixes_header_and_removes_scratch(tmp_path, read_lines) -> None:
    scratch = tmp_path / "t.d.x.csv.tmp"
    scratch.write_text("1,2\n3\n")
    staging = tmp_path / "t.d.x.csv.part"
    final = tmp_path / "t.d.csv"

    size = finalize_with_header(str(scratch), str(staging), str(final), ["a", "b"])

    assert read_lines(final) == ["a,b,", "1,2", "3"]
    assert size == os.path.getsize(final)
    assert not scratch.exists()
    assert not staging.exists()


def test_finalize_replaces_previous_export(tmp_path, read_lines) -> None:
    final = tmp_path / "t.d.csv"
    final.write_text("old\n")
    scratch = tmp_path / "s.tmp"
    scratch.write_text("new\n")
    finalize_with_header(str(scratch), str(tmp_path / "s.part"), str(final), ["c"])
    assert read_lines(final) == ["c,", "new"]


def test_finalize_failure_raises_io_write_error(tmp_path) -> None:
    missing = tmp_path / "missing.tmp"
    staging = tmp_path / "x.part"
    with pytest.raises(IoWriteError):
        finalize_with_header(str(missing), str(staging), str(tmp_path / "x.csv"), ["a"])
    assert not staging.exists()
    assert not (tmp_path / "x.csv").exists()
