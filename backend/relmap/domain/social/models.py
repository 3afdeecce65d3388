"""Social domain models: people, interactions and the closed type/role vocabularies."""
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from relmap.domain.common.errors import InvalidRelationshipType, InvalidSupportRole
from relmap.domain.common.types import generate_id

DEFAULT_HEALTH_SCORE = 5
MIN_HEALTH_SCORE = 0
MAX_HEALTH_SCORE = 10


def _normalize_tag(value: str) -> str:
    return value.strip().lower().replace("-", "_")


class RelationshipType(str, Enum):
    """Relationship type enum."""
    FAMILY = "family"
    CLOSE_FRIEND = "close_friend"
    FRIEND = "friend"
    COLLEAGUE = "colleague"
    MENTOR = "mentor"
    MENTEE = "mentee"
    ROMANTIC = "romantic"
    ACQUAINTANCE = "acquaintance"

    @classmethod
    def parse(cls, value) -> "RelationshipType":
        """Parse a client-supplied value. Raises InvalidRelationshipType."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(_normalize_tag(value))
            except ValueError:
                pass
        raise InvalidRelationshipType(str(value))


class SupportRole(str, Enum):
    """Support role enum."""
    EMOTIONAL = "emotional"
    PRACTICAL = "practical"
    HEALTH = "health"
    FINANCIAL = "financial"
    PROFESSIONAL = "professional"
    SOCIAL = "social"

    @classmethod
    def parse(cls, value) -> "SupportRole":
        """Parse a client-supplied value. Raises InvalidSupportRole."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(_normalize_tag(value))
            except ValueError:
                pass
        raise InvalidSupportRole(str(value))

    @classmethod
    def parse_many(cls, values: Optional[Iterable]) -> list["SupportRole"]:
        """Parse a collection of roles, dropping duplicates but keeping first-seen order."""
        roles: list[SupportRole] = []
        for value in values or ():
            role = cls.parse(value)
            if role not in roles:
                roles.append(role)
        return roles


class Interaction(BaseModel):
    """A single logged contact event against a person."""

    id: str
    person_id: str
    type: str = "call"
    duration_minutes: int = 30
    quality_score: int = 5
    notes: str = ""
    topics: list[str] = Field(default_factory=list)
    timestamp: datetime

    @classmethod
    def create(
        cls,
        person_id: str,
        timestamp: datetime,
        type: str = "call",
        duration_minutes: int = 30,
        quality_score: int = 5,
        notes: str = "",
        topics: Optional[list[str]] = None,
    ) -> "Interaction":
        """Create a new interaction."""
        return cls(
            id=generate_id(),
            person_id=person_id,
            type=type,
            duration_minutes=duration_minutes,
            quality_score=quality_score,
            notes=notes,
            topics=list(topics or []),
            timestamp=timestamp,
        )


class Person(BaseModel):
    """One tracked relationship belonging to exactly one owner."""

    id: str
    owner_id: str
    name: str
    relationship_type: RelationshipType
    support_roles: list[SupportRole] = Field(default_factory=list)
    notes: str = ""
    contact_frequency_target: str = "weekly"
    contact_count: int = 0
    health_score: int = DEFAULT_HEALTH_SCORE
    interactions: list[Interaction] = Field(default_factory=list)
    last_contact_at: datetime
    created_at: datetime

    @classmethod
    def create(
        cls,
        owner_id: str,
        name: str,
        relationship_type: RelationshipType,
        now: datetime,
        support_roles: Optional[list[SupportRole]] = None,
        notes: str = "",
        contact_frequency_target: str = "weekly",
    ) -> "Person":
        """Create a new person with the default health score."""
        return cls(
            id=generate_id(),
            owner_id=owner_id,
            name=name,
            relationship_type=relationship_type,
            support_roles=list(support_roles or []),
            notes=notes,
            contact_frequency_target=contact_frequency_target,
            contact_count=0,
            health_score=DEFAULT_HEALTH_SCORE,
            interactions=[],
            last_contact_at=now,
            created_at=now,
        )
