from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from eczemahub.core.errors import ConfigurationError


@dataclass(frozen=True)
class AppPaths:
    home_dir: Path
    snapshot_path: Path


DEFAULT_HOME_DIRNAME = ".eczemahub"
SNAPSHOT_FILENAME = "store.snapshot.json"


def load_paths(home: Path | None = None) -> AppPaths:
    if home is not None:
        home_dir = home.expanduser().resolve()
    else:
        home_raw = os.getenv("ECZEMAHUB_HOME")
        if home_raw:
            home_dir = Path(home_raw).expanduser().resolve()
        else:
            home_dir = Path.cwd().resolve() / DEFAULT_HOME_DIRNAME

    if home_dir.exists() and not home_dir.is_dir():
        raise ConfigurationError(f"Store home is not a directory: {home_dir}")

    return AppPaths(
        home_dir=home_dir,
        snapshot_path=home_dir / SNAPSHOT_FILENAME,
    )
