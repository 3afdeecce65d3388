"""Display metadata for relationship types and support roles.

Presentation only. Validation lives on the enums in models.py.
"""
from dataclasses import dataclass

from relmap.domain.social.models import RelationshipType, SupportRole


@dataclass(frozen=True)
class RelationshipTypeInfo:
    """Display info for a relationship type."""
    type: RelationshipType
    label: str
    emoji: str
    color: str


@dataclass(frozen=True)
class SupportRoleInfo:
    """Display info for a support role."""
    role: SupportRole
    label: str
    emoji: str
    examples: tuple[str, ...]


RELATIONSHIP_TYPES: dict[RelationshipType, RelationshipTypeInfo] = {
    info.type: info
    for info in (
        RelationshipTypeInfo(RelationshipType.FAMILY, "Family", "👨‍👩‍👧‍👦", "#FF6B6B"),
        RelationshipTypeInfo(RelationshipType.CLOSE_FRIEND, "Close Friend", "👯", "#4ECDC4"),
        RelationshipTypeInfo(RelationshipType.FRIEND, "Friend", "🤝", "#45B7D1"),
        RelationshipTypeInfo(RelationshipType.COLLEAGUE, "Colleague", "💼", "#96CEB4"),
        RelationshipTypeInfo(RelationshipType.MENTOR, "Mentor", "🧑‍🏫", "#FFEAA7"),
        RelationshipTypeInfo(RelationshipType.MENTEE, "Mentee", "📚", "#DFE6E9"),
        RelationshipTypeInfo(RelationshipType.ROMANTIC, "Romantic Partner", "💕", "#FF7675"),
        RelationshipTypeInfo(RelationshipType.ACQUAINTANCE, "Acquaintance", "👋", "#B0BEC5"),
    )
}

SUPPORT_ROLES: dict[SupportRole, SupportRoleInfo] = {
    info.role: info
    for info in (
        SupportRoleInfo(SupportRole.EMOTIONAL, "Emotional Support", "💙", ("listening", "advice", "comfort")),
        SupportRoleInfo(SupportRole.PRACTICAL, "Practical Support", "🤲", ("help", "resources", "time")),
        SupportRoleInfo(SupportRole.HEALTH, "Health Support", "🏥", ("fitness", "nutrition", "wellness")),
        SupportRoleInfo(SupportRole.FINANCIAL, "Financial Support", "💰", ("advice", "resources")),
        SupportRoleInfo(SupportRole.PROFESSIONAL, "Professional Support", "💼", ("career", "mentoring", "opportunities")),
        SupportRoleInfo(SupportRole.SOCIAL, "Social Support", "🎉", ("events", "activities", "companionship")),
    )
}


def relationship_type_info(relationship_type: RelationshipType) -> RelationshipTypeInfo:
    return RELATIONSHIP_TYPES[relationship_type]


def support_role_info(role: SupportRole) -> SupportRoleInfo:
    return SUPPORT_ROLES[role]


def relationship_type_catalog() -> list[RelationshipTypeInfo]:
    """All relationship types in enum order."""
    return [RELATIONSHIP_TYPES[t] for t in RelationshipType]


def support_role_catalog() -> list[SupportRoleInfo]:
    """All support roles in enum order."""
    return [SUPPORT_ROLES[r] for r in SupportRole]
