"""
setexport — Dynamic-schema CSV export for schema-less key-value stores.

Exports every selected (namespace, set) partition to "<namespace>.<set>.csv", discovering
columns while records stream in and writing the header once the stream ends.

## Layers
- setexport.core: zero-IO domain types (ids, filters, values, errors, report models).
- setexport.io: settings, file writes/reads, run manifest.
- setexport.store: store client protocol and implementations.
- setexport.engine: selection, predicates, schema registry, workers, coordinator.
- setexport.cli: command line entrypoint.

## Examples
```python
from setexport import ExportSettings, Exporter
from setexport.store import MemoryStore

store = MemoryStore()
store.put("test", "demo", 1, {"a": 1, "b": "x"})
manifest = Exporter(ExportSettings(output_dir="out"), store).run()  # doctest: +SKIP
```
"""

from __future__ import annotations

from .engine import Exporter
from .io import ExportSettings

__all__ = [
    "ExportSettings",
    "Exporter",
]

__version__ = "0.1.0"
