from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable

from eczemahub.application.services.resource_service import ResourceStore
from eczemahub.core.config import AppPaths
from eczemahub.core.files import ensure_directory
from eczemahub.infrastructure.snapshot.store import SnapshotFileStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BootResult:
    mode: str
    resources: int
    next_id: int


@dataclass(slots=True)
class SuspendResult:
    snapshot_bytes: int
    resources: int


class StoreHost:
    """Brackets a ResourceStore with restore-on-boot and snapshot-on-suspend.

    ``boot`` must run before the store serves any operation. When a snapshot
    file exists the store is rehydrated from it (warm restart); a snapshot
    that cannot be decoded aborts the boot with ``SnapshotError``. Without a
    snapshot file the store starts empty (cold start).
    """

    def __init__(
        self,
        paths: AppPaths,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.paths = paths
        self.snapshots = SnapshotFileStore(paths.snapshot_path)
        self.store = ResourceStore(clock=clock)
        self._suspend_lock = threading.Lock()

    def boot(self) -> BootResult:
        if self.snapshots.exists():
            self.store.restore(self.snapshots.read())
            mode = "warm"
        else:
            mode = "cold"

        stats = self.store.stats()
        logger.info(
            "Store %s start: %d resources, next id %d",
            mode,
            stats.total,
            stats.next_id,
        )
        return BootResult(mode=mode, resources=stats.total, next_id=stats.next_id)

    def suspend(self) -> SuspendResult:
        # Snapshot and write happen under one lock, so writes land in state order.
        with self._suspend_lock:
            ensure_directory(self.paths.home_dir)
            blob = self.store.snapshot()
            self.snapshots.write(blob)
            stats = self.store.stats()
        logger.info("Store snapshot written to %s (%d bytes)", self.paths.snapshot_path, len(blob))
        return SuspendResult(snapshot_bytes=len(blob), resources=stats.total)
