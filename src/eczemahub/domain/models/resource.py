from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from eczemahub.core.errors import ValidationError

TITLE_MAX_CHARS = 100
DESCRIPTION_MAX_CHARS = 500


class ResourceCategory(str, Enum):
    TREATMENT = "Treatment"
    PREVENTION = "Prevention"
    RESEARCH = "Research"
    DIET_ADVICE = "DietAdvice"
    TESTIMONIAL = "Testimonial"
    MEDICAL_ADVICE = "MedicalAdvice"

    @classmethod
    def parse(cls, value: str | ResourceCategory) -> ResourceCategory:
        """Resolve a category from its canonical name or a snake/kebab spelling.

        Matching ignores case, underscores and hyphens, so ``diet_advice``,
        ``diet-advice`` and ``DietAdvice`` all resolve to ``DIET_ADVICE``.
        Raises ``ValueError`` for anything outside the fixed enumeration.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().replace("_", "").replace("-", "").lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValueError(f"Unknown resource category: {value}")


@dataclass(slots=True)
class Resource:
    id: int
    title: str
    description: str
    category: ResourceCategory
    created_at: int
    updated_at: int
    verified: bool = False

    def matches(self, needle_lower: str) -> bool:
        return needle_lower in self.title.lower() or needle_lower in self.description.lower()


@dataclass(slots=True)
class StoreStats:
    total: int
    verified: int
    next_id: int
    has_admin: bool
    by_category: dict[str, int]


def validate_fields(title: str, description: str) -> None:
    """Raise ``ValidationError`` naming the first field outside its length bounds."""
    if not 1 <= len(title) <= TITLE_MAX_CHARS:
        raise ValidationError(
            f"Title must be 1-{TITLE_MAX_CHARS} characters long (got {len(title)})."
        )
    if not 1 <= len(description) <= DESCRIPTION_MAX_CHARS:
        raise ValidationError(
            f"Description must be 1-{DESCRIPTION_MAX_CHARS} characters long (got {len(description)})."
        )
