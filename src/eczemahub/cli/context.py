from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console

from eczemahub.application.services.host_service import StoreHost
from eczemahub.core.config import AppPaths


@dataclass(slots=True)
class CLIContext:
    paths: AppPaths
    console: Console

    def boot_host(self) -> StoreHost:
        host = StoreHost(self.paths)
        host.boot()
        return host
