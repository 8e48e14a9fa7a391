from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Any, AsyncIterator, Callable, TypeVar

from fastapi import FastAPI, Header, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from eczemahub.application.services.host_service import StoreHost
from eczemahub.core.config import AppPaths
from eczemahub.core.errors import (
    AlreadyExistsError,
    EczemaHubError,
    IdSpaceExhaustedError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from eczemahub.domain.models.resource import Resource

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResourceRequest(BaseModel):
    title: str
    description: str
    category: str


class AdminRequest(BaseModel):
    caller: str


def _resource_payload(resource: Resource) -> dict[str, Any]:
    payload = asdict(resource)
    payload["category"] = resource.category.value
    return payload


def _status_for(exc: EczemaHubError) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, UnauthorizedError):
        return 403
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, AlreadyExistsError):
        return 409
    if isinstance(exc, IdSpaceExhaustedError):
        return 507
    return 500


def create_app(
    paths: AppPaths,
    clock: Callable[[], int] | None = None,
) -> FastAPI:
    # Restore runs before the app exists, so no route can reach an unrestored store.
    host = StoreHost(paths, clock=clock)
    host.boot()
    store = host.store

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        host.suspend()

    app = FastAPI(title="Eczema Hub", version="0.1.0", lifespan=lifespan)

    def _env_bool(name: str, default: bool) -> bool:
        raw = os.getenv(name)
        if raw is None:
            return default
        value = str(raw).strip().lower()
        if value in {"1", "true", "yes", "on"}:
            return True
        if value in {"0", "false", "no", "off"}:
            return False
        return default

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    snapshot_on_write = _env_bool("ECZEMAHUB_SNAPSHOT_ON_WRITE", True)

    def call(fn: Callable[[], T], *, mutates: bool = False) -> T:
        try:
            result = fn()
        except EczemaHubError as exc:
            raise HTTPException(status_code=_status_for(exc), detail=str(exc)) from exc
        if mutates and snapshot_on_write:
            host.suspend()
        return result

    @app.get("/api/status")
    def api_status() -> dict[str, Any]:
        stats = store.stats()
        return {"ok": True, "status": asdict(stats)}

    @app.get("/api/resources")
    def api_resources(category: str | None = Query(default=None)) -> dict[str, Any]:
        if category is None:
            resources = call(store.list_resources)
        else:
            resources = call(lambda: store.list_resources_by_category(category))
        return {"ok": True, "count": len(resources), "resources": [_resource_payload(r) for r in resources]}

    @app.get("/api/resources/search")
    def api_resources_search(q: str = Query(default="")) -> dict[str, Any]:
        resources = call(lambda: store.search_resources(q))
        return {"ok": True, "count": len(resources), "resources": [_resource_payload(r) for r in resources]}

    @app.get("/api/resources/{resource_id}")
    def api_resource_detail(resource_id: int) -> dict[str, Any]:
        resource = call(lambda: store.get_resource(resource_id))
        return {"ok": True, "resource": _resource_payload(resource)}

    @app.post("/api/resources")
    def api_resource_create(req: ResourceRequest) -> dict[str, Any]:
        resource = call(
            lambda: store.create_resource(req.title, req.description, req.category),
            mutates=True,
        )
        return {"ok": True, "resource": _resource_payload(resource)}

    @app.put("/api/resources/{resource_id}")
    def api_resource_update(resource_id: int, req: ResourceRequest) -> dict[str, Any]:
        resource = call(
            lambda: store.update_resource(resource_id, req.title, req.description, req.category),
            mutates=True,
        )
        return {"ok": True, "resource": _resource_payload(resource)}

    @app.delete("/api/resources/{resource_id}")
    def api_resource_delete(resource_id: int) -> dict[str, Any]:
        call(lambda: store.delete_resource(resource_id), mutates=True)
        return {"ok": True, "deleted": resource_id}

    @app.post("/api/resources/{resource_id}/verify")
    def api_resource_verify(
        resource_id: int,
        x_caller: str | None = Header(default=None),
    ) -> dict[str, Any]:
        if not x_caller:
            raise HTTPException(status_code=403, detail="X-Caller header is required to verify resources.")
        resource = call(lambda: store.verify_resource(resource_id, x_caller), mutates=True)
        return {"ok": True, "resource": _resource_payload(resource)}

    @app.post("/api/admin")
    def api_set_admin(req: AdminRequest) -> dict[str, Any]:
        call(lambda: store.set_admin(req.caller), mutates=True)
        logger.info("Admin identity replaced")
        return {"ok": True, "admin": req.caller}

    return app
