"""
Command line entrypoint.

Usage:
    setexport export -H 10.0.0.5 -n test -s 'demo|users' -d out --from 01/01/2024-00:00:00 -c 4
    setexport export --mock records.jsonl -d out -m
    setexport inspect out/test.demo.csv --n 10

Exit codes
- 0  every selected partition exported
- 1  one or more partitions failed (others completed)
- 2  configuration error (bad option, concurrency < 1, unparseable date, bad pattern)
- 3  discovery error (store unreachable while listing partitions or namespace config)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from setexport.core.errors import ConfigError, DiscoveryError
from setexport.core.filters import parse_time_ns
from setexport.engine.exporter import Exporter
from setexport.io.config import ExportSettings, split_csv
from setexport.io.errors import IoError
from setexport.io.read import read_export
from setexport.store.client import StoreClient
from setexport.store.memory import MemoryStore

logger = logging.getLogger("setexport")

EXIT_OK = 0
EXIT_PARTIAL = 1
EXIT_CONFIG = 2
EXIT_DISCOVERY = 3


def _configure_logging(verbosity: int) -> None:
    level = logging.DEBUG if verbosity > 0 else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s",
    )


def _load_mock_store(path: Path) -> MemoryStore:
    """
    Build a MemoryStore from a JSON-lines file.

    Each line: {"namespace": ..., "set": ..., "key": ..., "fields": {...}} plus optional
    generation, expiration, last_update_ns, device_size, memory_size and a
    {"namespace_config": {"name": ..., "in_memory": bool}} line form.
    """
    store = MemoryStore()
    rows: list[dict[str, Any]] = []
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read mock data {path}: {exc}") from exc
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            obj = json.loads(line)
        except ValueError as exc:
            raise ConfigError(f"{path}:{lineno}: invalid JSON: {exc}") from exc
        if "namespace_config" in obj:
            nsc = obj["namespace_config"]
            store.add_namespace(nsc["name"], in_memory=bool(nsc.get("in_memory", False)))
        else:
            rows.append(obj)
    store.load(rows)
    return store


def _make_client(settings: ExportSettings, mock: str | None) -> StoreClient:
    if mock:
        return _load_mock_store(Path(mock))
    from setexport.store.aerospike import AerospikeStore

    try:
        return AerospikeStore(settings.seed_hosts(), settings.user, settings.password)
    except ConfigError:
        raise
    except Exception as exc:
        raise DiscoveryError(f"could not connect to {', '.join(settings.hosts)}: {exc}") from exc


def _settings_from_args(args: argparse.Namespace) -> ExportSettings:
    s = ExportSettings.load(args.config)
    overrides: dict[str, Any] = {}
    if args.host:
        overrides["hosts"] = split_csv(args.host)
    for name in ("port", "user", "password", "record_limit", "min_size", "max_size", "concurrency"):
        v = getattr(args, name)
        if v is not None:
            overrides[name] = v
    if args.namespace is not None:
        overrides["namespaces"] = split_csv(args.namespace)
    if args.set is not None:
        overrides["sets"] = split_csv(args.set)
    if args.directory is not None:
        overrides["output_dir"] = args.directory
    if args.metadata is not None:
        overrides["record_metadata"] = args.metadata
    if args.digest is not None:
        overrides["include_digest"] = args.digest
    start = parse_time_ns(args.from_time)
    if start is not None:
        overrides["start_time_ns"] = start
    end = parse_time_ns(args.to_time)
    if end is not None:
        overrides["end_time_ns"] = end
    return replace(s, **overrides)


def _export_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="setexport export",
        description="Export every selected set to <namespace>.<set>.csv.",
    )
    p.add_argument("-H", "--host", help="Seed host(s), comma separated, host or host:port (default: 127.0.0.1).")
    p.add_argument("-p", "--port", type=int, default=None, help="Server port (default: 3000).")
    p.add_argument("-U", "--user", default=None, help="User for secured clusters.")
    p.add_argument("-P", "--password", default=None, help="Password for secured clusters.")
    p.add_argument("-n", "--namespace", default=None, help="Comma separated namespace patterns (default: all).")
    p.add_argument("-s", "--set", default=None, help="Comma separated set patterns (default: all).")
    p.add_argument("-d", "--directory", default=None, help="Output directory (default: .).")
    p.add_argument("-f", "--from", dest="from_time", default=None,
                   help="From time: MM/dd/yyyy-HH:mm:ss, 'MMMM d yyyy HH:mm:ss +ZZZZ' or ISO-8601.")
    p.add_argument("-t", "--to", dest="to_time", default=None, help="To time (same formats as --from).")
    p.add_argument("-l", "--limit", dest="record_limit", type=int, default=None,
                   help="Records per set, 0 for unlimited (default: 0).")
    p.add_argument("-m", "--metadata", action="store_const", const=True, default=None,
                   help="Add _generation and _expiry columns.")
    p.add_argument("--digest", action="store_const", const=True, default=None,
                   help="Add a base64 _digest column.")
    p.add_argument("-I", "--min-size", dest="min_size", type=int, default=None,
                   help="Minimum record size in bytes (default: 0).")
    p.add_argument("-A", "--max-size", dest="max_size", type=int, default=None,
                   help="Maximum record size in bytes (default: unlimited).")
    p.add_argument("-c", "--concurrency", type=int, default=None,
                   help="Sets exported in parallel (default: 1).")
    p.add_argument("--config", default=None, help="TOML config file (default: ./setexport.toml).")
    p.add_argument("--mock", default=None, help="Export from a JSON-lines file instead of a cluster.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Debug logging.")
    return p


def _cmd_export(argv: list[str]) -> int:
    args = _export_parser().parse_args(argv)
    _configure_logging(args.verbose)
    try:
        settings = _settings_from_args(args).validate()
    except ConfigError as exc:
        logger.error("configuration error: %s", exc)
        return EXIT_CONFIG
    logger.debug("settings: %r", settings)

    try:
        client = _make_client(settings, args.mock)
    except ConfigError as exc:
        logger.error("configuration error: %s", exc)
        return EXIT_CONFIG
    except DiscoveryError as exc:
        logger.error("discovery error: %s", exc)
        return EXIT_DISCOVERY

    try:
        manifest = Exporter(settings, client).run()
    except ConfigError as exc:
        logger.error("configuration error: %s", exc)
        return EXIT_CONFIG
    except DiscoveryError as exc:
        logger.error("discovery error: %s", exc)
        return EXIT_DISCOVERY
    except IoError as exc:
        logger.error("%s", exc)
        return EXIT_PARTIAL
    finally:
        client.close()

    for report in manifest.failed:
        logger.error("failed: %s.%s: %s", report.namespace, report.set_name, report.error)
    return EXIT_PARTIAL if manifest.failed else EXIT_OK


def _cmd_inspect(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="setexport inspect", description="Show the head of an export file.")
    p.add_argument("path", help="Path to a <namespace>.<set>.csv export.")
    p.add_argument("--n", type=int, default=5, help="Rows to display.")
    args = p.parse_args(argv)
    try:
        df = read_export(args.path)
    except (OSError, IoError) as exc:
        print(f"cannot read {args.path}: {exc}", file=sys.stderr)
        return EXIT_CONFIG
    print(df.head(args.n))
    return EXIT_OK


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="setexport", description="Export key-value store sets to CSV.")
    sub = p.add_subparsers(dest="cmd", required=True)
    sub.add_parser("export", help="Export sets to CSV files.")
    sub.add_parser("inspect", help="Show the head of an export file.")
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        build_argparser().print_help()
        return
    cmd, rest = argv[0], argv[1:]
    if cmd == "export":
        code = _cmd_export(rest)
    elif cmd == "inspect":
        code = _cmd_inspect(rest)
    else:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        code = EXIT_CONFIG
    raise SystemExit(code)


if __name__ == "__main__":
    main()
