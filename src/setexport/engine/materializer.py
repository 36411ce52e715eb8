"""
Row materialization against a schema registry.

materialize() turns one scanned record into a positional row aligned to the registry as it
stands while the row is being written:

1. Initialize the registry from this record's field names if this is the first record.
2. Emit the reserved prefix values: digest (base64) and/or generation, expiration.
3. For each data column already in the registry, emit the record's value or None.
4. For each of the record's fields not yet in the registry (in the record's own order),
   append it to the registry and emit its value.

The row length equals the registry size after step 4. Rows written before later columns are
discovered are therefore shorter than the final header; they are not padded.
"""

from __future__ import annotations

from typing import Any

from setexport.core.filters import FilterParams
from setexport.core.values import classify, encode_bytes
from setexport.store.client import Key, Record

from .registry import SchemaRegistry


def materialize(
    key: Key,
    record: Record,
    registry: SchemaRegistry,
    params: FilterParams,
) -> list[Any]:
    """
    Build the positional row for `record`, extending `registry` with new columns.

    Args:
        key (Key): Record key (digest used when params.include_digest).
        record (Record): Record payload.
        registry (SchemaRegistry): The partition's registry (mutated).
        params (FilterParams): Supplies record_metadata / include_digest.

    Returns:
        list[Any]: Raw values in registry order; None marks a missing field.

    Raises:
        UnsupportedValueError: If a field value is outside the supported value kinds.
    """
    fields = record.fields
    registry.ensure_initialized(fields.keys(), params.record_metadata, params.include_digest)

    row: list[Any] = []
    if params.include_digest:
        row.append(encode_bytes(key.digest))
    if params.record_metadata:
        row.append(record.generation)
        row.append(record.expiration)

    for name in registry.data_columns():
        value = fields.get(name)
        classify(value)
        row.append(value)

    for name, value in fields.items():
        if registry.is_known(name):
            continue
        registry.append_if_new(name)
        classify(value)
        row.append(value)
    return row
