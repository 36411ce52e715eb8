"""
Aerospike-backed StoreClient.

Thin adapter over the `aerospike` Python client (optional extra: setexport[aerospike]).
The client library is imported lazily so the rest of the package, the --mock path and the
tests do not need it installed.

Mapping
- list_partitions(): info "sets" on a random node, parsed by parse_sets_info().
- namespace_config(): info "namespace/<ns>", parsed by parse_info_pairs().
- scan(): primary-index query with the FilterExpression compiled to
  aerospike_helpers.expressions; the foreach callback returns False to stop the stream.
"""

from __future__ import annotations

import logging
from typing import Any

from setexport.core.errors import ConfigError
from setexport.core.filters import FilterExpression, Metric
from setexport.core.typing import PartitionId

from .client import Key, OnRecord, Record, ScanAction

logger = logging.getLogger(__name__)


def _strip_request(response: str) -> str:
    # info responses may echo the request name followed by a tab
    text = response.strip()
    if "\t" in text:
        text = text.split("\t", 1)[1]
    return text.strip()


def parse_sets_info(response: str) -> list[PartitionId]:
    """
    Parse an info "sets" response into partition ids.

    Examples:
        >>> parse_sets_info("ns=test:set=demo:objects=3;ns=bar:set=x:objects=0;")
        [PartitionId(namespace='test', set_name='demo'), PartitionId(namespace='bar', set_name='x')]
    """
    out: list[PartitionId] = []
    for entry in _strip_request(response).split(";"):
        if not entry.strip():
            continue
        ns: str | None = None
        set_name: str | None = None
        for detail in entry.split(":"):
            name, sep, value = detail.partition("=")
            if not sep:
                continue
            if name == "ns":
                ns = value
            elif name in ("set", "set_name"):
                set_name = value
        if ns and set_name:
            out.append(PartitionId(ns, set_name))
    return out


def parse_info_pairs(response: str) -> dict[str, str]:
    """
    Parse a "k=v;k=v" info response into a dict.

    Examples:
        >>> parse_info_pairs("storage-engine=memory;replication-factor=2")
        {'storage-engine': 'memory', 'replication-factor': '2'}
    """
    out: dict[str, str] = {}
    for item in _strip_request(response).split(";"):
        name, sep, value = item.partition("=")
        if sep and name:
            out[name.strip()] = value.strip()
    return out


def compile_expression(expression: FilterExpression) -> Any:
    """Translate a FilterExpression into a compiled Aerospike filter expression."""
    from aerospike_helpers import expressions as exp

    metric_exprs = {
        Metric.LAST_UPDATE: exp.LastUpdateTime,
        Metric.DEVICE_SIZE: exp.DeviceSize,
        Metric.MEMORY_SIZE: exp.MemorySize,
    }
    terms = []
    for b in expression.bounds:
        make = metric_exprs[b.metric]
        terms.append(exp.GE(make(), b.low))
        terms.append(exp.LE(make(), b.high))
    return exp.And(*terms).compile()


class AerospikeStore:
    """
    StoreClient over a live Aerospike cluster.

    Args:
        hosts (list[tuple[str, int]]): Seed hosts.
        user (str | None): User for secured clusters.
        password (str | None): Password for secured clusters.

    Raises:
        ConfigError: If the aerospike client library is not installed.
    """

    def __init__(
        self,
        hosts: list[tuple[str, int]],
        user: str | None = None,
        password: str | None = None,
    ) -> None:
        try:
            import aerospike  # type: ignore
        except ImportError as exc:
            raise ConfigError(
                "the aerospike client is not installed; install setexport[aerospike]"
            ) from exc
        config: dict[str, Any] = {"hosts": list(hosts)}
        if user:
            config["user"] = user
            config["password"] = password or ""
        logger.debug("connecting to %s", ", ".join(f"{h}:{p}" for h, p in hosts))
        self._client = aerospike.client(config).connect()

    def list_partitions(self) -> list[PartitionId]:
        return parse_sets_info(self._client.info_random_node("sets"))

    def namespace_config(self, namespace: str) -> dict[str, str]:
        return parse_info_pairs(self._client.info_random_node(f"namespace/{namespace}"))

    def scan(
        self,
        namespace: str,
        set_name: str,
        expression: FilterExpression,
        on_record: OnRecord,
    ) -> ScanAction:
        query = self._client.query(namespace, set_name)
        policy = {"expressions": compile_expression(expression)}
        final = ScanAction.CONTINUE

        def _callback(item: tuple[Any, Any, Any]) -> bool | None:
            nonlocal final
            key_tuple, meta, bins = item
            digest = bytes(key_tuple[3]) if len(key_tuple) > 3 and key_tuple[3] else b""
            key = Key(namespace, set_name, digest, key_tuple[2] if len(key_tuple) > 2 else None)
            meta = meta or {}
            record = Record(
                fields=bins or {},
                generation=int(meta.get("gen", 0)),
                expiration=int(meta.get("ttl", 0)),
            )
            action = on_record(key, record)
            if action.stops:
                final = action
                return False
            return None

        query.foreach(_callback, policy)
        return final

    def close(self) -> None:
        self._client.close()
