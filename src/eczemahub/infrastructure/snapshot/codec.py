"""Versioned serialization of the resource store state.

Snapshots are UTF-8 JSON documents tagged with a format name and version:

* version 1 carries ``resources`` and ``next_id`` only;
* version 2 adds the optional ``admin`` identity.

``encode_state`` always writes the current version. ``decode_state`` accepts
every known version and migrates older layouts forward, so a v1 snapshot
restores with no admin set.
"""

from __future__ import annotations

import json

from eczemahub.core.errors import SnapshotError, ValidationError
from eczemahub.domain.models.resource import Resource, ResourceCategory, validate_fields
from eczemahub.domain.models.snapshot import StoreState

SNAPSHOT_FORMAT = "eczemahub.snapshot"
SNAPSHOT_VERSION = 2
SUPPORTED_VERSIONS = frozenset({1, 2})

U64_MAX = 2**64 - 1


def encode_state(state: StoreState) -> bytes:
    payload = {
        "format": SNAPSHOT_FORMAT,
        "version": SNAPSHOT_VERSION,
        "next_id": state.next_id,
        "admin": state.admin,
        "resources": [_resource_to_dict(state.resources[rid]) for rid in sorted(state.resources)],
    }
    return json.dumps(payload, ensure_ascii=True, sort_keys=True).encode("utf-8")


def decode_state(blob: bytes | None) -> StoreState:
    if not blob:
        raise SnapshotError("Snapshot is missing or empty.")

    try:
        payload = json.loads(blob.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SnapshotError(f"Snapshot is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise SnapshotError("Snapshot must be a JSON object.")
    if payload.get("format") != SNAPSHOT_FORMAT:
        raise SnapshotError(f"Unrecognized snapshot format: {payload.get('format')!r}")

    version = payload.get("version")
    if isinstance(version, bool) or version not in SUPPORTED_VERSIONS:
        raise SnapshotError(f"Unsupported snapshot version: {version!r}")

    if version == 1:
        payload = _migrate_v1_to_v2(payload)

    return _state_from_v2(payload)


def _migrate_v1_to_v2(payload: dict[str, object]) -> dict[str, object]:
    if "admin" in payload:
        raise SnapshotError("Version 1 snapshots cannot carry an admin field.")
    migrated = dict(payload)
    migrated["version"] = 2
    migrated["admin"] = None
    return migrated


def _state_from_v2(payload: dict[str, object]) -> StoreState:
    next_id = _u64(payload.get("next_id"), "next_id")
    if next_id < 1:
        raise SnapshotError("next_id must be at least 1.")

    admin = payload.get("admin")
    if admin is not None and not isinstance(admin, str):
        raise SnapshotError("admin must be a string or null.")

    rows = payload.get("resources")
    if not isinstance(rows, list):
        raise SnapshotError("resources must be a list.")

    resources: dict[int, Resource] = {}
    for row in rows:
        resource = _resource_from_dict(row)
        if resource.id in resources:
            raise SnapshotError(f"Duplicate resource id in snapshot: {resource.id}")
        if resource.id >= next_id:
            raise SnapshotError(
                f"Resource id {resource.id} is not below next_id {next_id}."
            )
        resources[resource.id] = resource

    return StoreState(resources=resources, next_id=next_id, admin=admin)


def _resource_to_dict(resource: Resource) -> dict[str, object]:
    return {
        "id": resource.id,
        "title": resource.title,
        "description": resource.description,
        "category": resource.category.value,
        "created_at": resource.created_at,
        "updated_at": resource.updated_at,
        "verified": resource.verified,
    }


def _resource_from_dict(row: object) -> Resource:
    if not isinstance(row, dict):
        raise SnapshotError("Each resource entry must be a JSON object.")

    title = row.get("title")
    description = row.get("description")
    if not isinstance(title, str) or not isinstance(description, str):
        raise SnapshotError("Resource title and description must be strings.")
    try:
        validate_fields(title, description)
    except ValidationError as exc:
        raise SnapshotError(f"Invalid resource {row.get('id')!r}: {exc}") from exc

    raw_category = row.get("category")
    try:
        category = ResourceCategory(raw_category)
    except ValueError as exc:
        raise SnapshotError(f"Unknown resource category: {raw_category!r}") from exc

    verified = row.get("verified")
    if not isinstance(verified, bool):
        raise SnapshotError("Resource verified flag must be a boolean.")

    return Resource(
        id=_u64(row.get("id"), "id"),
        title=title,
        description=description,
        category=category,
        created_at=_u64(row.get("created_at"), "created_at"),
        updated_at=_u64(row.get("updated_at"), "updated_at"),
        verified=verified,
    )


def _u64(value: object, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SnapshotError(f"{field_name} must be an integer.")
    if value < 0 or value > U64_MAX:
        raise SnapshotError(f"{field_name} is outside the unsigned 64-bit range.")
    return value
