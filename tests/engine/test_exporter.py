from __future__ import annotations

import pytest

from setexport.core.errors import ConfigError, DiscoveryError
from setexport.engine.exporter import Exporter
from setexport.io.config import ExportSettings
from setexport.io.manifest import load_manifest
from setexport.store.memory import MemoryStore


@pytest.fixture
def cluster(demo_store: MemoryStore) -> MemoryStore:
    demo_store.put("test", "users", 1, {"name": "ada", "age": 36})
    demo_store.put("other", "demo", 1, {"x": 1})
    return demo_store


def test_end_to_end_export_with_manifest(cluster, tmp_path, read_lines):
    settings = ExportSettings(namespaces=("test",), output_dir=str(tmp_path), concurrency=2)
    manifest = Exporter(settings, cluster).run()

    assert [str(r.partition) for r in manifest.partitions] == ["test.demo", "test.users"]
    assert manifest.failed == []
    assert manifest.concurrency == 2
    assert read_lines(tmp_path / "test.demo.csv")[0] == "a,b,c,"
    assert read_lines(tmp_path / "test.users.csv") == ["age,name,", "36,ada"]
    assert not (tmp_path / "other.demo.csv").exists()

    loaded = load_manifest(str(tmp_path))
    assert loaded == manifest


def test_failures_are_reported_in_manifest(cluster, tmp_path):
    cluster.fail_scan_after[next(p for p in cluster.list_partitions() if p.set_name == "users")] = 0
    settings = ExportSettings(namespaces=("test",), output_dir=str(tmp_path))
    manifest = Exporter(settings, cluster).run()

    assert [str(r.partition) for r in manifest.failed] == ["test.users"]
    assert (tmp_path / "test.demo.csv").exists()
    assert load_manifest(str(tmp_path)).failed[0].status == "failed"


def test_manifest_can_be_skipped(cluster, tmp_path):
    settings = ExportSettings(sets=("demo",), output_dir=str(tmp_path))
    manifest = Exporter(settings, cluster).run(write_run_manifest=False)

    assert len(manifest.partitions) == 2
    assert load_manifest(str(tmp_path)) is None


def test_nothing_selected_still_succeeds(cluster, tmp_path):
    settings = ExportSettings(namespaces=("missing",), output_dir=str(tmp_path))
    manifest = Exporter(settings, cluster).run()
    assert manifest.partitions == []
    assert cluster.scanned == []


def test_invalid_settings_raise_before_scanning(cluster, tmp_path):
    with pytest.raises(ConfigError):
        Exporter(ExportSettings(output_dir=str(tmp_path), concurrency=0), cluster).run()
    with pytest.raises(ConfigError):
        Exporter(ExportSettings(output_dir=str(tmp_path), min_size=10, max_size=1), cluster).run()
    assert cluster.scanned == []


def test_discovery_failure_raises(cluster, tmp_path):
    cluster.fail_listing = True
    with pytest.raises(DiscoveryError):
        Exporter(ExportSettings(output_dir=str(tmp_path)), cluster).run()
    assert cluster.scanned == []
