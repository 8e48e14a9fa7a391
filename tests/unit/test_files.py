from pathlib import Path

import pytest

from eczemahub.core.files import write_bytes_atomic


def test_write_bytes_atomic_replaces_target(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "store.snapshot.json"
    write_bytes_atomic(target, b"first")
    write_bytes_atomic(target, b"second")

    assert target.read_bytes() == b"second"
    assert list(target.parent.glob("*.tmp")) == []


def test_write_bytes_atomic_cleans_up_on_failure(tmp_path: Path) -> None:
    target = tmp_path / "store.snapshot.json"
    target.mkdir()
    (target / "keep").write_text("x", encoding="utf-8")

    with pytest.raises(OSError):
        write_bytes_atomic(target, b"payload")

    assert list(tmp_path.glob("*.tmp")) == []
