from __future__ import annotations

import json
import os

import pytest

from setexport.core.filters import FilterParams
from setexport.core.schema import PartitionReport
from setexport.io.errors import IoManifestError
from setexport.io.manifest import build_manifest, load_manifest, write_manifest


def test_write_and_load_manifest(tmp_path) -> None:
    reports = [
        PartitionReport(namespace="test", set_name="demo", status="done", rows=3, columns=["a"]),
        PartitionReport(namespace="test", set_name="bad", status="failed", error="ScanError: x"),
    ]
    m = build_manifest(FilterParams(record_limit=10), 2, reports, started_at="2024-01-01T00:00:00+00:00")

    path = write_manifest(str(tmp_path / "out"), m)

    assert os.path.basename(path) == "export.manifest.json"
    assert not os.path.exists(path + ".tmp")
    with open(path, encoding="utf-8") as fh:
        raw = json.load(fh)
    assert raw["concurrency"] == 2
    assert raw["filters"]["record_limit"] == 10

    loaded = load_manifest(str(tmp_path / "out"))
    assert loaded is not None
    assert [r.set_name for r in loaded.partitions] == ["bad", "demo"]
    assert [r.set_name for r in loaded.failed] == ["bad"]


def test_load_manifest_missing_and_corrupt(tmp_path) -> None:
    assert load_manifest(str(tmp_path)) is None
    (tmp_path / "export.manifest.json").write_text("{not json")
    with pytest.raises(IoManifestError):
        load_manifest(str(tmp_path))
