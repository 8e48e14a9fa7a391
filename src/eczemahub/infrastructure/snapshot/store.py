from __future__ import annotations

from pathlib import Path

from eczemahub.core.errors import SnapshotError
from eczemahub.core.files import write_bytes_atomic


class SnapshotFileStore:
    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> bytes:
        try:
            return self.path.read_bytes()
        except OSError as exc:
            raise SnapshotError(f"Unable to read snapshot {self.path}: {exc}") from exc

    def write(self, blob: bytes) -> None:
        try:
            write_bytes_atomic(self.path, blob)
        except OSError as exc:
            raise SnapshotError(f"Unable to write snapshot {self.path}: {exc}") from exc
