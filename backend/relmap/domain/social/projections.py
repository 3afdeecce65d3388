"""Read-side projections over an owner's relationships.

All projections are recomputed from the stored person list on every call and
never mutate the persons they are given.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from relmap.domain.social.catalog import support_role_info
from relmap.domain.social.models import MAX_HEALTH_SCORE, Person, RelationshipType, SupportRole
from relmap.domain.social.scoring import average_health, round_half_up

INNER_CIRCLE_MIN_SCORE = 8
MIDDLE_CIRCLE_MIN_SCORE = 5

SELF_NODE_ID = "self"
SELF_NODE_TYPE = "self"


# ── Circles ───────────────────────────────────────────────────────────────────


@dataclass
class Circle:
    """One concentric circle of relationships."""
    key: str
    description: str
    health_score_required: int
    members: list[Person] = field(default_factory=list)


@dataclass
class SocialCircles:
    inner: Circle
    middle: Circle
    outer: Circle

    def all(self) -> list[Circle]:
        return [self.inner, self.middle, self.outer]


def classify_circles(persons: Sequence[Person]) -> SocialCircles:
    """Partition persons into inner / middle / outer circles by health score."""
    circles = SocialCircles(
        inner=Circle("inner", "Close, trusted relationships", INNER_CIRCLE_MIN_SCORE),
        middle=Circle("middle", "Regular, supportive relationships", MIDDLE_CIRCLE_MIN_SCORE),
        outer=Circle("outer", "Acquaintances and newer relationships", 0),
    )
    for person in persons:
        if person.health_score >= INNER_CIRCLE_MIN_SCORE:
            circles.inner.members.append(person)
        elif person.health_score >= MIDDLE_CIRCLE_MIN_SCORE:
            circles.middle.members.append(person)
        else:
            circles.outer.members.append(person)
    return circles


# ── Support network ───────────────────────────────────────────────────────────


@dataclass
class RoleCoverage:
    role: SupportRole
    providers: list[Person] = field(default_factory=list)


@dataclass
class SupportGap:
    role: SupportRole
    recommendation: str


@dataclass
class SupportNetwork:
    by_role: dict[SupportRole, RoleCoverage]
    gaps: list[SupportGap]


def _gap_for(role: SupportRole) -> SupportGap:
    label = support_role_info(role).label
    return SupportGap(role=role, recommendation=f"Consider building a relationship for {label}")


def build_support_network(persons: Sequence[Person]) -> SupportNetwork:
    """Group persons under every support role they declare and report uncovered roles.

    Roles appear in enum order. A person declaring several roles is listed
    under each of them. Covered roles and gaps together span every role.
    """
    by_role: dict[SupportRole, RoleCoverage] = {}
    for role in SupportRole:
        providers = [p for p in persons if role in p.support_roles]
        if providers:
            by_role[role] = RoleCoverage(role=role, providers=providers)
    gaps = [_gap_for(role) for role in SupportRole if role not in by_role]
    return SupportNetwork(by_role=by_role, gaps=gaps)


# ── Graph ─────────────────────────────────────────────────────────────────────


@dataclass
class GraphNode:
    id: str
    name: str
    type: str
    health_score: int
    last_contact_at: Optional[datetime] = None


@dataclass
class GraphLink:
    source: str
    target: str
    type: str


@dataclass
class GraphSummary:
    total_relationships: int
    by_type: dict[RelationshipType, list[str]]
    average_health_score: int


@dataclass
class RelationshipGraph:
    owner_id: str
    relationships: list[Person]
    summary: GraphSummary
    nodes: list[GraphNode]
    links: list[GraphLink]


def build_relationship_graph(
    owner_id: str,
    persons: Sequence[Person],
    self_label: str = "You",
) -> RelationshipGraph:
    """Star graph centred on the owner: one node and one undirected link per person."""
    by_type: dict[RelationshipType, list[str]] = {t: [] for t in RelationshipType}
    nodes = [
        GraphNode(
            id=SELF_NODE_ID,
            name=self_label,
            type=SELF_NODE_TYPE,
            health_score=MAX_HEALTH_SCORE,
        )
    ]
    links: list[GraphLink] = []

    for person in persons:
        by_type[person.relationship_type].append(person.id)
        nodes.append(
            GraphNode(
                id=person.id,
                name=person.name,
                type=person.relationship_type.value,
                health_score=person.health_score,
                last_contact_at=person.last_contact_at,
            )
        )
        links.append(
            GraphLink(
                source=SELF_NODE_ID,
                target=person.id,
                type=person.relationship_type.value,
            )
        )

    summary = GraphSummary(
        total_relationships=len(persons),
        by_type=by_type,
        average_health_score=round_half_up(average_health(persons)),
    )
    return RelationshipGraph(
        owner_id=owner_id,
        relationships=list(persons),
        summary=summary,
        nodes=nodes,
        links=links,
    )
