from __future__ import annotations

from pathlib import Path

import pytest

from setexport.core.constants import MAX_INT64
from setexport.core.errors import ConfigError
from setexport.io.config import ExportSettings

_ENV_KEYS = [
    "SETEXPORT_HOSTS",
    "SETEXPORT_OUTPUT_DIR",
    "SETEXPORT_CONCURRENCY",
    "SETEXPORT_RECORD_LIMIT",
    "SETEXPORT_RECORD_METADATA",
    "SETEXPORT_INCLUDE_DIGEST",
    "SETEXPORT_NAMESPACES",
    "SETEXPORT_SETS",
]


def _clear_env(monkeypatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def _write_toml(tmp: Path, name: str, content: str) -> Path:
    p = tmp / name
    p.write_text(content)
    return p


def test_settings_precedence_env_over_toml(tmp_path: Path, monkeypatch) -> None:
    _write_toml(
        tmp_path,
        "setexport.toml",
        """
        [export]
        output_dir = "toml_out"
        concurrency = 2
        namespaces = ["test"]
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)
    monkeypatch.setenv("SETEXPORT_OUTPUT_DIR", "env_out")
    monkeypatch.setenv("SETEXPORT_CONCURRENCY", "8")

    s = ExportSettings.load()

    assert s.output_dir == "env_out"
    assert s.concurrency == 8
    assert s.namespaces == ("test",)  # from TOML, not overridden


def test_settings_from_pyproject_tool_table(tmp_path: Path, monkeypatch) -> None:
    _write_toml(
        tmp_path,
        "pyproject.toml",
        """
        [tool.setexport]
        sets = "demo,users"
        record_metadata = true
        record_limit = 50
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)

    s = ExportSettings.load()

    assert s.sets == ("demo", "users")
    assert s.record_metadata is True
    assert s.record_limit == 50


def test_settings_defaults_when_no_config(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)

    s = ExportSettings.load()

    assert s.hosts == ("127.0.0.1",)
    assert s.output_dir == "."
    assert s.concurrency == 1
    assert s.end_time_ns == MAX_INT64
    assert s.namespaces == () and s.sets == ()


def test_env_booleans_and_lists(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)
    monkeypatch.setenv("SETEXPORT_INCLUDE_DIGEST", "yes")
    monkeypatch.setenv("SETEXPORT_HOSTS", "a:3100, b")
    monkeypatch.setenv("SETEXPORT_RECORD_LIMIT", "not-a-number")

    s = ExportSettings.load()

    assert s.include_digest is True
    assert s.record_limit == 0  # malformed values keep the previous value
    assert s.seed_hosts() == [("a", 3100), ("b", 3000)]


def test_validate_rejects_bad_concurrency() -> None:
    with pytest.raises(ConfigError):
        ExportSettings(concurrency=0).validate()
    with pytest.raises(ConfigError):
        ExportSettings(concurrency=-3).validate()
    assert ExportSettings(concurrency=1).validate().concurrency == 1


def test_filter_params_derived_from_settings() -> None:
    s = ExportSettings(min_size=100, max_size=200, record_limit=5, include_digest=True)
    p = s.filter_params()
    assert (p.min_size, p.max_size, p.record_limit, p.include_digest) == (100, 200, 5, True)
    with pytest.raises(ConfigError):
        ExportSettings(min_size=300, max_size=200).validate()


def test_repr_masks_password() -> None:
    assert "hunter2" not in repr(ExportSettings(user="u", password="hunter2"))
