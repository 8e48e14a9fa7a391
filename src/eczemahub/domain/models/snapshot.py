from __future__ import annotations

from dataclasses import dataclass, field

from eczemahub.domain.models.resource import Resource


@dataclass(slots=True)
class StoreState:
    resources: dict[int, Resource] = field(default_factory=dict)
    next_id: int = 1
    admin: str | None = None
