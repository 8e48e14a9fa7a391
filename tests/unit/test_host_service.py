import threading
from pathlib import Path

import pytest

from eczemahub.application.services.host_service import StoreHost
from eczemahub.core.config import load_paths
from eczemahub.core.errors import ConfigurationError, SnapshotError
from eczemahub.domain.models.resource import ResourceCategory


def test_cold_start_without_snapshot(tmp_path: Path) -> None:
    host = StoreHost(load_paths(tmp_path / "home"))

    result = host.boot()

    assert result.mode == "cold"
    assert result.resources == 0
    assert result.next_id == 1


def test_warm_restart_rehydrates_previous_state(tmp_path: Path) -> None:
    paths = load_paths(tmp_path / "home")
    first = StoreHost(paths)
    first.boot()
    first.store.create_resource("Moisturizer basics", "Daily routine", ResourceCategory.TREATMENT)
    first.store.create_resource("Trigger diary", "Track flare triggers", ResourceCategory.PREVENTION)
    first.store.delete_resource(2)
    first.store.set_admin("admin-x")
    suspended = first.suspend()
    assert suspended.resources == 1
    assert paths.snapshot_path.exists()

    second = StoreHost(paths)
    result = second.boot()

    assert result.mode == "warm"
    assert result.resources == 1
    assert result.next_id == 3
    assert second.store.list_resources() == first.store.list_resources()
    assert second.store.verify_resource(1, "admin-x").verified is True


def test_corrupt_snapshot_aborts_boot(tmp_path: Path) -> None:
    paths = load_paths(tmp_path / "home")
    paths.home_dir.mkdir(parents=True)
    paths.snapshot_path.write_bytes(b'{"format": "eczemahub.snapshot", "version": 2')

    host = StoreHost(paths)

    with pytest.raises(SnapshotError):
        host.boot()


def test_load_paths_honours_env_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ECZEMAHUB_HOME", str(tmp_path / "env-home"))

    paths = load_paths()

    assert paths.home_dir == (tmp_path / "env-home").resolve()
    assert paths.snapshot_path.name == "store.snapshot.json"


def test_load_paths_rejects_file_as_home(tmp_path: Path) -> None:
    not_a_dir = tmp_path / "home"
    not_a_dir.write_text("", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_paths(not_a_dir)


def test_concurrent_mutations_and_suspends_all_succeed(tmp_path: Path) -> None:
    paths = load_paths(tmp_path / "home")
    host = StoreHost(paths)
    host.boot()
    workers, per_worker = 8, 50
    errors: list[Exception] = []
    errors_lock = threading.Lock()
    start = threading.Barrier(workers)

    def _worker(n: int) -> None:
        start.wait()
        for i in range(per_worker):
            try:
                host.store.create_resource(f"entry {n}-{i}", "written through", ResourceCategory.TREATMENT)
                host.suspend()
            except Exception as exc:
                with errors_lock:
                    errors.append(exc)

    threads = [threading.Thread(target=_worker, args=(n,)) for n in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)

    assert errors == []
    assert list(paths.home_dir.glob("*.tmp")) == []

    restarted = StoreHost(paths)
    result = restarted.boot()
    assert result.resources == workers * per_worker
    assert result.next_id == workers * per_worker + 1
