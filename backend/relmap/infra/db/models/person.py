"""Relationship map database models."""
from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import relationship

from relmap.domain.common.types import as_utc
from relmap.domain.social.models import (
    Interaction as InteractionEntity,
    Person as PersonEntity,
    RelationshipType,
    SupportRole,
)
from relmap.infra.db.base import Base


class PersonModel(Base):
    """One relationship in an owner's map."""

    __tablename__ = "people"
    __table_args__ = (
        CheckConstraint("health_score >= 0 AND health_score <= 10", name="ck_people_health_score_range"),
        CheckConstraint("contact_count >= 0", name="ck_people_contact_count_positive"),
    )

    # Surrogate key; insertion order defines creation order
    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=False, unique=True, index=True)
    owner_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    relationship_type = Column(SQLEnum(RelationshipType, name="relationshiptype"), nullable=False)
    support_roles = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=False, default="")
    contact_frequency_target = Column(String, nullable=False, default="weekly")
    contact_count = Column(Integer, nullable=False, default=0)
    health_score = Column(Integer, nullable=False, default=5)
    last_contact_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    # Always eager-loaded together with the person row; lazy loads are an error
    interactions = relationship(
        "InteractionModel",
        order_by="InteractionModel.pk",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    def to_entity(self) -> PersonEntity:
        """Convert to domain entity, interactions in insertion order."""
        return PersonEntity(
            id=self.id,
            owner_id=self.owner_id,
            name=self.name,
            relationship_type=self.relationship_type,
            support_roles=[SupportRole(r) for r in (self.support_roles or [])],
            notes=self.notes or "",
            contact_frequency_target=self.contact_frequency_target,
            contact_count=self.contact_count,
            health_score=self.health_score,
            interactions=[i.to_entity() for i in self.interactions],
            last_contact_at=as_utc(self.last_contact_at),
            created_at=as_utc(self.created_at),
        )

    @classmethod
    def from_entity(cls, entity: PersonEntity) -> "PersonModel":
        """Create from domain entity."""
        return cls(
            id=entity.id,
            owner_id=entity.owner_id,
            name=entity.name,
            relationship_type=entity.relationship_type,
            support_roles=[r.value for r in entity.support_roles],
            notes=entity.notes,
            contact_frequency_target=entity.contact_frequency_target,
            contact_count=entity.contact_count,
            health_score=entity.health_score,
            last_contact_at=entity.last_contact_at,
            created_at=entity.created_at,
            interactions=[InteractionModel.from_entity(i) for i in entity.interactions],
        )

    def apply_details(self, entity: PersonEntity) -> None:
        """Copy client-editable fields from the entity."""
        self.name = entity.name
        self.notes = entity.notes
        self.support_roles = [r.value for r in entity.support_roles]
        self.contact_frequency_target = entity.contact_frequency_target

    def apply_contact_state(self, entity: PersonEntity) -> None:
        """Copy recency, count and score from the entity."""
        self.last_contact_at = entity.last_contact_at
        self.contact_count = entity.contact_count
        self.health_score = entity.health_score


class InteractionModel(Base):
    """Append-only interaction log entry."""

    __tablename__ = "person_interactions"
    __table_args__ = (
        CheckConstraint("quality_score >= 1 AND quality_score <= 10", name="ck_interactions_quality_range"),
        CheckConstraint("duration_minutes >= 0", name="ck_interactions_duration_positive"),
    )

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=False, unique=True)
    person_pk = Column(Integer, ForeignKey("people.pk", ondelete="CASCADE"), nullable=False, index=True)
    person_id = Column(String, nullable=False)
    type = Column(String, nullable=False, default="call")
    duration_minutes = Column(Integer, nullable=False, default=30)
    quality_score = Column(Integer, nullable=False, default=5)
    notes = Column(Text, nullable=False, default="")
    topics = Column(JSON, nullable=False, default=list)
    timestamp = Column(DateTime(timezone=True), nullable=False)

    def to_entity(self) -> InteractionEntity:
        """Convert to domain entity."""
        return InteractionEntity(
            id=self.id,
            person_id=self.person_id,
            type=self.type,
            duration_minutes=self.duration_minutes,
            quality_score=self.quality_score,
            notes=self.notes or "",
            topics=list(self.topics or []),
            timestamp=as_utc(self.timestamp),
        )

    @classmethod
    def from_entity(cls, entity: InteractionEntity) -> "InteractionModel":
        """Create from domain entity; person_pk is set when appended to PersonModel.interactions."""
        return cls(
            id=entity.id,
            person_id=entity.person_id,
            type=entity.type,
            duration_minutes=entity.duration_minutes,
            quality_score=entity.quality_score,
            notes=entity.notes,
            topics=list(entity.topics),
            timestamp=entity.timestamp,
        )
