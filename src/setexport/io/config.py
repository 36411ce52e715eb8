"""
Configuration for setexport.

Defines ExportSettings, a frozen dataclass carrying every runtime option of an export run:
connection, partition selection, output location, filter bounds and pool size. Defaults are
sourced from setexport.core.constants.

Precedence
- CLI flags (applied by setexport.cli via dataclasses.replace) > environment (SETEXPORT_*)
  > TOML (./setexport.toml [export] or ./pyproject.toml [tool.setexport]) > defaults.

Import DAG discipline
- Depends only on stdlib and setexport.core.

Notes
- The loaders are lenient: malformed values in env/TOML are ignored and the previous value kept.
  validate() is the strict gate and raises ConfigError.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from setexport.core.constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_HOST,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PORT,
    MAX_INT64,
)
from setexport.core.errors import ConfigError
from setexport.core.filters import FilterParams

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_INT_FIELDS = (
    "start_time_ns",
    "end_time_ns",
    "min_size",
    "max_size",
    "record_limit",
    "concurrency",
)
_BOOL_FIELDS = ("record_metadata", "include_digest")
_LIST_FIELDS = ("hosts", "namespaces", "sets")


def split_csv(value: str | None) -> tuple[str, ...]:
    """Split a comma separated option into a tuple of stripped, non-empty items."""
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class ExportSettings:
    """
    Runtime settings for an export run.

    Attributes:
        hosts (tuple[str, ...]): Seed hosts as "host" or "host:port".
        port (int): Port used for seed hosts given without one.
        user (str | None): User for secured clusters.
        password (str | None): Password for secured clusters (never logged).
        namespaces (tuple[str, ...]): Namespace patterns (regex, full match); empty = all.
        sets (tuple[str, ...]): Set patterns (regex, full match); empty = all.
        output_dir (str): Directory receiving "<namespace>.<set>.csv" files.
        start_time_ns (int): Inclusive lower last-update bound.
        end_time_ns (int): Inclusive upper last-update bound.
        min_size (int): Inclusive lower size bound.
        max_size (int): Inclusive upper size bound.
        record_limit (int): Rows per partition; 0 = unlimited.
        record_metadata (bool): Emit _generation/_expiry columns.
        include_digest (bool): Emit the _digest column.
        concurrency (int): Number of partitions exported in parallel (>= 1).

    Examples:
        >>> from setexport.io.config import ExportSettings
        >>> ExportSettings(output_dir="out", concurrency=4)  # doctest: +ELLIPSIS
        ExportSettings(...)
    """

    hosts: tuple[str, ...] = (DEFAULT_HOST,)
    port: int = DEFAULT_PORT
    user: str | None = None
    password: str | None = None
    namespaces: tuple[str, ...] = ()
    sets: tuple[str, ...] = ()
    output_dir: str = DEFAULT_OUTPUT_DIR
    start_time_ns: int = 0
    end_time_ns: int = MAX_INT64
    min_size: int = 0
    max_size: int = MAX_INT64
    record_limit: int = 0
    record_metadata: bool = False
    include_digest: bool = False
    concurrency: int = DEFAULT_CONCURRENCY

    def __repr__(self) -> str:
        masked = "***" if self.password else None
        return (
            f"ExportSettings(hosts={self.hosts!r}, port={self.port}, user={self.user!r}, "
            f"password={masked!r}, namespaces={self.namespaces!r}, sets={self.sets!r}, "
            f"output_dir={self.output_dir!r}, concurrency={self.concurrency})"
        )

    def seed_hosts(self) -> list[tuple[str, int]]:
        """Return (host, port) pairs, applying the default port where none is given."""
        out: list[tuple[str, int]] = []
        for h in self.hosts:
            host, sep, port = h.rpartition(":")
            if sep and port.isdigit():
                out.append((host, int(port)))
            else:
                out.append((h, self.port))
        return out

    def filter_params(self) -> FilterParams:
        """
        Build the immutable FilterParams for this run.

        Raises:
            ConfigError: If the bounds are inconsistent.
        """
        return FilterParams(
            start_time_ns=self.start_time_ns,
            end_time_ns=self.end_time_ns,
            min_size=self.min_size,
            max_size=self.max_size,
            record_limit=self.record_limit,
            record_metadata=self.record_metadata,
            include_digest=self.include_digest,
        )

    def validate(self) -> ExportSettings:
        """
        Check settings that must hold before any scan starts.

        Returns:
            ExportSettings: self, for chaining.

        Raises:
            ConfigError: On concurrency < 1, missing hosts or inconsistent filter bounds.
        """
        if self.concurrency < 1:
            raise ConfigError(f"concurrency must be >= 1, got {self.concurrency}")
        if not self.hosts:
            raise ConfigError("at least one seed host is required")
        if not (0 < self.port < 65536):
            raise ConfigError(f"invalid port {self.port}")
        self.filter_params()
        return self

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: ExportSettings, cfg: dict[str, Any] | None) -> ExportSettings:
        """Apply a loose config mapping onto ExportSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        def _bool(v: Any) -> bool:
            if isinstance(v, bool):
                return v
            if isinstance(v, (int, float)):
                return bool(v)
            if isinstance(v, str):
                return v.strip().lower() in _TRUE
            return False

        def _items(v: Any) -> tuple[str, ...] | None:
            if isinstance(v, str):
                return split_csv(v)
            if isinstance(v, (list, tuple)):
                return tuple(str(x) for x in v)
            return None

        for name in _LIST_FIELDS:
            if name in cfg:
                items = _items(cfg[name])
                if items is not None:
                    s = replace(s, **{name: items})

        for name in _INT_FIELDS:
            if name in cfg:
                try:
                    s = replace(s, **{name: int(cfg[name])})
                except (TypeError, ValueError):
                    pass

        for name in _BOOL_FIELDS:
            if name in cfg:
                s = replace(s, **{name: _bool(cfg[name])})

        if "port" in cfg:
            try:
                s = replace(s, port=int(cfg["port"]))
            except (TypeError, ValueError):
                pass

        for name in ("user", "password", "output_dir"):
            if name in cfg and isinstance(cfg[name], str):
                s = replace(s, **{name: cfg[name]})

        return s

    @classmethod
    def from_env(cls, base: ExportSettings | None = None, prefix: str = "SETEXPORT_") -> ExportSettings:
        """
        Build ExportSettings from environment variables. Precedence is env > base > defaults.

        Recognized variables (prefix + upper-case field name), e.g.:
            - SETEXPORT_HOSTS (comma separated)
            - SETEXPORT_NAMESPACES / SETEXPORT_SETS (comma separated patterns)
            - SETEXPORT_OUTPUT_DIR
            - SETEXPORT_RECORD_LIMIT, SETEXPORT_CONCURRENCY
            - SETEXPORT_RECORD_METADATA, SETEXPORT_INCLUDE_DIGEST (1/0/true/false/yes/no/on/off)
            - SETEXPORT_USER, SETEXPORT_PASSWORD
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        names = _LIST_FIELDS + _INT_FIELDS + _BOOL_FIELDS + ("port", "user", "password", "output_dir")
        for name in names:
            v = os.getenv(prefix + name.upper())
            if v:
                mapping[name] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> ExportSettings:
        """
        Build ExportSettings from a TOML file.

        Search order when `path` is None:
            1) ./setexport.toml (with either an [export] table or top-level keys)
            2) ./pyproject.toml under [tool.setexport]

        Returns defaults if no file is present.
        """
        s = cls()

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError):
                return None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "setexport.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("setexport") if isinstance(tool, dict) else None
            elif isinstance(data.get("export"), dict):
                cfg = data["export"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> ExportSettings:
        """
        Load ExportSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults
                (setexport.toml, pyproject.toml).

        Returns:
            ExportSettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
