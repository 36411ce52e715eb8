"""
Exporter facade bound to a settings object and a store client.

Runs the whole pipeline for one invocation:

    settings.validate() -> select_partitions() -> build_filters() -> ExportCoordinator.run()
    -> write run manifest

Configuration and discovery errors raise (ConfigError, DiscoveryError) before any partition
is scanned. Partition failures are reported in the returned RunManifest instead.
"""

from __future__ import annotations

import logging

from setexport.core.schema import RunManifest
from setexport.io.config import ExportSettings
from setexport.io.manifest import build_manifest, utc_now_iso, write_manifest
from setexport.store.client import StoreClient

from .coordinator import ExportCoordinator
from .predicate import StorageClassifier, build_filters
from .selector import select_partitions

logger = logging.getLogger(__name__)


class Exporter:
    """
    Facade for one export run.

    Notes:
        - Does not own the client; callers close it.
        - The run manifest is written to settings.output_dir even when partitions fail.
    """

    def __init__(self, settings: ExportSettings, client: StoreClient) -> None:
        self.settings = settings
        self.client = client

    def run(self, *, write_run_manifest: bool = True) -> RunManifest:
        """
        Export every selected partition.

        Returns:
            RunManifest: Per-partition outcomes.

        Raises:
            setexport.core.errors.ConfigError: Invalid settings or patterns.
            setexport.core.errors.DiscoveryError: Store unreachable during discovery.
            setexport.io.errors.IoManifestError: Manifest write failed.
        """
        s = self.settings.validate()
        params = s.filter_params()
        started = utc_now_iso()
        coordinator = ExportCoordinator(self.client, params, s.output_dir, s.concurrency)

        partitions = select_partitions(self.client, s.namespaces, s.sets)
        classifier = StorageClassifier(self.client)
        filters = build_filters((p.namespace for p in partitions), params, classifier)

        reports = coordinator.run(partitions, filters)
        manifest = build_manifest(params, s.concurrency, reports, started_at=started)
        if write_run_manifest:
            path = write_manifest(s.output_dir, manifest)
            logger.debug("wrote run manifest %s", path)
        return manifest
