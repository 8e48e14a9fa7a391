from __future__ import annotations

import threading
from collections import Counter
from dataclasses import replace
from typing import Callable

from eczemahub.core.errors import (
    IdSpaceExhaustedError,
    NotFoundError,
    SnapshotError,
    UnauthorizedError,
    ValidationError,
)
from eczemahub.core.time import now_unix_seconds
from eczemahub.domain.models.resource import (
    Resource,
    ResourceCategory,
    StoreStats,
    validate_fields,
)
from eczemahub.domain.models.snapshot import StoreState
from eczemahub.infrastructure.snapshot.codec import U64_MAX, decode_state, encode_state


class ResourceStore:
    """Process-wide owner of all resources, the id counter and the admin identity.

    Every public method runs under one re-entrant lock, so handlers dispatched
    from a thread pool still observe one operation at a time. Callers always
    receive copies; stored instances change only through the methods below.
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._clock = clock or now_unix_seconds
        self._lock = threading.RLock()
        self._state = StoreState()
        self._served = False
        self._restored = False

    def create_resource(
        self,
        title: str,
        description: str,
        category: ResourceCategory | str,
    ) -> Resource:
        validate_fields(title, description)
        category = _parse_category(category)
        with self._lock:
            self._served = True
            resource_id = self._state.next_id
            # next_id must itself stay within u64 so the snapshot can be read back.
            if resource_id >= U64_MAX:
                raise IdSpaceExhaustedError(f"No resource ids left to allocate (next id {resource_id}).")
            now = self._clock()
            resource = Resource(
                id=resource_id,
                title=title,
                description=description,
                category=category,
                created_at=now,
                updated_at=now,
                verified=False,
            )
            self._state.resources[resource_id] = resource
            self._state.next_id = resource_id + 1
            return replace(resource)

    def get_resource(self, resource_id: int) -> Resource:
        with self._lock:
            self._served = True
            return replace(self._require(resource_id))

    def list_resources(self) -> list[Resource]:
        with self._lock:
            self._served = True
            return [replace(r) for r in self._ordered()]

    def list_resources_by_category(self, category: ResourceCategory | str) -> list[Resource]:
        category = _parse_category(category)
        with self._lock:
            self._served = True
            return [replace(r) for r in self._ordered() if r.category is category]

    def search_resources(self, query: str) -> list[Resource]:
        needle = query.lower()
        with self._lock:
            self._served = True
            return [replace(r) for r in self._ordered() if r.matches(needle)]

    def update_resource(
        self,
        resource_id: int,
        title: str,
        description: str,
        category: ResourceCategory | str,
    ) -> Resource:
        # Validation runs before the lookup; an invalid payload for a missing id
        # reports the validation failure.
        validate_fields(title, description)
        category = _parse_category(category)
        with self._lock:
            self._served = True
            resource = self._require(resource_id)
            resource.title = title
            resource.description = description
            resource.category = category
            resource.updated_at = self._clock()
            return replace(resource)

    def delete_resource(self, resource_id: int) -> None:
        with self._lock:
            self._served = True
            if self._state.resources.pop(resource_id, None) is None:
                raise NotFoundError(f"Resource not found: {resource_id}")

    def verify_resource(self, resource_id: int, caller: str) -> Resource:
        with self._lock:
            self._served = True
            if self._state.admin is None or caller != self._state.admin:
                raise UnauthorizedError(f"Caller is not authorized to verify resources: {caller}")
            resource = self._require(resource_id)
            resource.verified = True
            resource.updated_at = self._clock()
            return replace(resource)

    def set_admin(self, caller: str) -> None:
        # Overwrites unconditionally; there is no prior-admin check.
        with self._lock:
            self._served = True
            self._state.admin = caller

    def get_admin(self) -> str | None:
        with self._lock:
            return self._state.admin

    def stats(self) -> StoreStats:
        with self._lock:
            resources = list(self._state.resources.values())
            counts = Counter(r.category.value for r in resources)
            return StoreStats(
                total=len(resources),
                verified=sum(1 for r in resources if r.verified),
                next_id=self._state.next_id,
                has_admin=self._state.admin is not None,
                by_category={c.value: counts.get(c.value, 0) for c in ResourceCategory},
            )

    def snapshot(self) -> bytes:
        with self._lock:
            return encode_state(self._state)

    def restore(self, blob: bytes | None) -> None:
        with self._lock:
            if self._restored:
                raise SnapshotError("Store has already been restored in this process.")
            if self._served:
                raise SnapshotError("Store cannot be restored after it has served operations.")
            state = decode_state(blob)
            self._state = state
            self._restored = True

    def _require(self, resource_id: int) -> Resource:
        resource = self._state.resources.get(resource_id)
        if resource is None:
            raise NotFoundError(f"Resource not found: {resource_id}")
        return resource

    def _ordered(self) -> list[Resource]:
        return [self._state.resources[rid] for rid in sorted(self._state.resources)]


def _parse_category(value: ResourceCategory | str) -> ResourceCategory:
    try:
        return ResourceCategory.parse(value)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
