"""Request and response models for the social routes."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from relmap.domain.social.catalog import relationship_type_info, support_role_info
from relmap.domain.social.models import Interaction, Person
from relmap.domain.social.projections import Circle, RoleCoverage, SupportGap


class AddPersonRequest(BaseModel):
    """Add person request model."""
    name: str = Field(min_length=1, max_length=200)
    relationship_type: str
    support_roles: list[str] = Field(default_factory=list)
    notes: str = ""
    contact_frequency_target: str = "weekly"


class UpdatePersonRequest(BaseModel):
    """Partial update; omitted fields are left unchanged."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    notes: Optional[str] = None
    support_roles: Optional[list[str]] = None
    contact_frequency_target: Optional[str] = None


class RecordInteractionRequest(BaseModel):
    """Record interaction request model."""
    type: str = "call"
    duration_minutes: int = Field(default=30, ge=0)
    quality_score: int = Field(default=5, ge=1, le=10)
    notes: str = ""
    topics: list[str] = Field(default_factory=list)


class InteractionResponse(BaseModel):
    """Interaction response model."""
    id: str
    person_id: str
    type: str
    duration_minutes: int
    quality_score: int
    notes: str
    topics: list[str]
    timestamp: datetime

    @classmethod
    def from_entity(cls, interaction: Interaction) -> "InteractionResponse":
        return cls(**interaction.model_dump())


class PersonResponse(BaseModel):
    """Person response model."""
    id: str
    name: str
    relationship_type: str
    relationship_label: str
    relationship_emoji: str
    support_roles: list[str]
    notes: str
    contact_frequency_target: str
    contact_count: int
    health_score: int
    last_contact_at: datetime
    created_at: datetime

    @classmethod
    def from_entity(cls, person: Person) -> "PersonResponse":
        info = relationship_type_info(person.relationship_type)
        return cls(
            id=person.id,
            name=person.name,
            relationship_type=person.relationship_type.value,
            relationship_label=info.label,
            relationship_emoji=info.emoji,
            support_roles=[r.value for r in person.support_roles],
            notes=person.notes,
            contact_frequency_target=person.contact_frequency_target,
            contact_count=person.contact_count,
            health_score=person.health_score,
            last_contact_at=person.last_contact_at,
            created_at=person.created_at,
        )


class PersonDetailResponse(PersonResponse):
    """Person with its interaction history (oldest first)."""
    interactions: list[InteractionResponse]

    @classmethod
    def from_entity(cls, person: Person) -> "PersonDetailResponse":
        base = PersonResponse.from_entity(person)
        return cls(
            **base.model_dump(),
            interactions=[InteractionResponse.from_entity(i) for i in person.interactions],
        )


# ── Graph ─────────────────────────────────────────────────────────────────────


class GraphNodeResponse(BaseModel):
    id: str
    name: str
    type: str
    health_score: int
    last_contact_at: Optional[datetime] = None


class GraphLinkResponse(BaseModel):
    source: str
    target: str
    type: str


class VisualizationResponse(BaseModel):
    nodes: list[GraphNodeResponse]
    links: list[GraphLinkResponse]


class GraphSummaryResponse(BaseModel):
    total_relationships: int
    by_type: dict[str, list[str]]
    average_health_score: int


class RelationshipGraphResponse(BaseModel):
    user_id: str
    relationships: list[PersonResponse]
    summary: GraphSummaryResponse
    visualization: VisualizationResponse


# ── Circles ───────────────────────────────────────────────────────────────────


class CircleMemberResponse(BaseModel):
    id: str
    name: str
    relationship: str
    emoji: str
    health_score: int
    last_contact_at: datetime

    @classmethod
    def from_entity(cls, person: Person) -> "CircleMemberResponse":
        info = relationship_type_info(person.relationship_type)
        return cls(
            id=person.id,
            name=person.name,
            relationship=info.label,
            emoji=info.emoji,
            health_score=person.health_score,
            last_contact_at=person.last_contact_at,
        )


class CircleResponse(BaseModel):
    description: str
    health_score_required: int
    members: list[CircleMemberResponse]

    @classmethod
    def from_circle(cls, circle: Circle) -> "CircleResponse":
        return cls(
            description=circle.description,
            health_score_required=circle.health_score_required,
            members=[CircleMemberResponse.from_entity(p) for p in circle.members],
        )


class SocialCirclesResponse(BaseModel):
    inner_circle: CircleResponse
    middle_circle: CircleResponse
    outer_circle: CircleResponse


# ── Support network ───────────────────────────────────────────────────────────


class SupportProviderResponse(BaseModel):
    id: str
    name: str
    relationship: str
    emoji: str
    last_contact_at: datetime


class RoleCoverageResponse(BaseModel):
    name: str
    emoji: str
    providers: list[SupportProviderResponse]

    @classmethod
    def from_coverage(cls, coverage: RoleCoverage) -> "RoleCoverageResponse":
        role = support_role_info(coverage.role)
        providers = []
        for person in coverage.providers:
            info = relationship_type_info(person.relationship_type)
            providers.append(
                SupportProviderResponse(
                    id=person.id,
                    name=person.name,
                    relationship=info.label,
                    emoji=info.emoji,
                    last_contact_at=person.last_contact_at,
                )
            )
        return cls(name=role.label, emoji=role.emoji, providers=providers)


class SupportGapResponse(BaseModel):
    role_id: str
    name: str
    emoji: str
    recommendation: str

    @classmethod
    def from_gap(cls, gap: SupportGap) -> "SupportGapResponse":
        role = support_role_info(gap.role)
        return cls(
            role_id=gap.role.value,
            name=role.label,
            emoji=role.emoji,
            recommendation=gap.recommendation,
        )


class SupportNetworkResponse(BaseModel):
    user_id: str
    by_role: dict[str, RoleCoverageResponse]
    gaps: list[SupportGapResponse]


class SocialScoreResponse(BaseModel):
    user_id: str
    score: int


# ── Catalog ───────────────────────────────────────────────────────────────────


class RelationshipTypeResponse(BaseModel):
    id: str
    name: str
    emoji: str
    color: str


class SupportRoleResponse(BaseModel):
    id: str
    name: str
    emoji: str
    examples: list[str]


class CatalogResponse(BaseModel):
    relationship_types: list[RelationshipTypeResponse]
    support_roles: list[SupportRoleResponse]
