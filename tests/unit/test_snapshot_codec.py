import json

import pytest

from eczemahub.core.errors import SnapshotError
from eczemahub.domain.models.resource import Resource, ResourceCategory
from eczemahub.domain.models.snapshot import StoreState
from eczemahub.infrastructure.snapshot.codec import (
    SNAPSHOT_FORMAT,
    SNAPSHOT_VERSION,
    decode_state,
    encode_state,
)


def _row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": 1,
        "title": "Oat baths",
        "description": "Colloidal oatmeal soak",
        "category": "Treatment",
        "created_at": 100,
        "updated_at": 120,
        "verified": False,
    }
    row.update(overrides)
    return row


def _blob(**payload: object) -> bytes:
    doc: dict[str, object] = {
        "format": SNAPSHOT_FORMAT,
        "version": 2,
        "next_id": 2,
        "admin": None,
        "resources": [_row()],
    }
    doc.update(payload)
    return json.dumps(doc).encode("utf-8")


def test_encode_writes_current_version_with_admin() -> None:
    state = StoreState(
        resources={
            3: Resource(3, "Wet wraps", "Overnight therapy", ResourceCategory.TREATMENT, 10, 11, True),
        },
        next_id=5,
        admin="admin-x",
    )

    doc = json.loads(encode_state(state))

    assert doc["format"] == SNAPSHOT_FORMAT
    assert doc["version"] == SNAPSHOT_VERSION
    assert doc["admin"] == "admin-x"
    assert doc["next_id"] == 5
    assert doc["resources"][0]["category"] == "Treatment"
    assert decode_state(encode_state(state)) == state


def test_version_1_snapshot_restores_without_admin() -> None:
    blob = json.dumps(
        {"format": SNAPSHOT_FORMAT, "version": 1, "next_id": 7, "resources": [_row(id=6)]}
    ).encode("utf-8")

    state = decode_state(blob)

    assert state.admin is None
    assert state.next_id == 7
    assert list(state.resources) == [6]
    assert state.resources[6].category is ResourceCategory.TREATMENT


def test_version_1_snapshot_with_admin_field_is_rejected() -> None:
    blob = json.dumps(
        {"format": SNAPSHOT_FORMAT, "version": 1, "next_id": 2, "admin": "x", "resources": []}
    ).encode("utf-8")

    with pytest.raises(SnapshotError):
        decode_state(blob)


@pytest.mark.parametrize(
    "blob",
    [
        None,
        b"",
        b"\xff\xfe",
        b"[]",
        b'{"format": "something-else", "version": 2}',
    ],
)
def test_malformed_blobs_are_rejected(blob: bytes | None) -> None:
    with pytest.raises(SnapshotError):
        decode_state(blob)


def test_unknown_version_is_rejected() -> None:
    with pytest.raises(SnapshotError, match="version"):
        decode_state(_blob(version=3))
    with pytest.raises(SnapshotError, match="version"):
        decode_state(_blob(version=True))


def test_invariants_are_checked() -> None:
    with pytest.raises(SnapshotError, match="Duplicate"):
        decode_state(_blob(next_id=5, resources=[_row(), _row()]))
    with pytest.raises(SnapshotError, match="next_id"):
        decode_state(_blob(next_id=1))
    with pytest.raises(SnapshotError, match="next_id"):
        decode_state(_blob(next_id=0, resources=[]))


def test_resource_fields_are_checked() -> None:
    with pytest.raises(SnapshotError, match="category"):
        decode_state(_blob(resources=[_row(category="Astrology")]))
    with pytest.raises(SnapshotError):
        decode_state(_blob(resources=[_row(title="")]))
    with pytest.raises(SnapshotError):
        decode_state(_blob(resources=[_row(verified="yes")]))
    with pytest.raises(SnapshotError):
        decode_state(_blob(resources=[_row(created_at=-1)]))
    with pytest.raises(SnapshotError):
        decode_state(_blob(resources=[_row(id="1")]))
    with pytest.raises(SnapshotError):
        decode_state(_blob(admin=5))
