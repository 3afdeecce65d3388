"""Tests for circles, support network and graph projections."""
from conftest import T0
from relmap.domain.social.models import Person, RelationshipType, SupportRole
from relmap.domain.social.projections import (
    build_relationship_graph,
    build_support_network,
    classify_circles,
)


def make_person(name: str, health_score: int = 5, roles=(), rel_type=RelationshipType.FRIEND) -> Person:
    person = Person.create(
        owner_id="owner-1",
        name=name,
        relationship_type=rel_type,
        now=T0,
        support_roles=list(roles),
    )
    person.health_score = health_score
    return person


class TestCircles:
    """Tests for classify_circles."""

    def test_thresholds(self):
        persons = [make_person(f"p{score}", health_score=score) for score in range(11)]
        circles = classify_circles(persons)

        assert [p.health_score for p in circles.inner.members] == [8, 9, 10]
        assert [p.health_score for p in circles.middle.members] == [5, 6, 7]
        assert [p.health_score for p in circles.outer.members] == [0, 1, 2, 3, 4]

    def test_partition_is_complete_and_disjoint(self):
        persons = [make_person(f"p{i}", health_score=(i * 3) % 11) for i in range(20)]
        circles = classify_circles(persons)

        ids = [p.id for circle in circles.all() for p in circle.members]
        assert sorted(ids) == sorted(p.id for p in persons)
        assert len(ids) == len(set(ids))

    def test_metadata(self):
        circles = classify_circles([])
        assert circles.inner.health_score_required == 8
        assert circles.middle.health_score_required == 5
        assert circles.outer.health_score_required == 0
        assert circles.inner.description == "Close, trusted relationships"
        assert all(c.members == [] for c in circles.all())

    def test_preserves_input_order(self):
        a = make_person("a", health_score=9)
        b = make_person("b", health_score=8)
        assert classify_circles([a, b]).inner.members == [a, b]


class TestSupportNetwork:
    """Tests for build_support_network."""

    def test_person_listed_under_every_declared_role(self):
        person = make_person("Dana", roles=[SupportRole.EMOTIONAL, SupportRole.HEALTH])
        network = build_support_network([person])

        assert network.by_role[SupportRole.EMOTIONAL].providers == [person]
        assert network.by_role[SupportRole.HEALTH].providers == [person]
        gap_roles = {gap.role for gap in network.gaps}
        assert SupportRole.EMOTIONAL not in gap_roles
        assert SupportRole.HEALTH not in gap_roles

    def test_gaps_complement_covered_roles(self):
        persons = [
            make_person("a", roles=[SupportRole.PRACTICAL]),
            make_person("b", roles=[SupportRole.PRACTICAL, SupportRole.SOCIAL]),
        ]
        network = build_support_network(persons)

        covered = set(network.by_role)
        gaps = {gap.role for gap in network.gaps}
        assert covered == {SupportRole.PRACTICAL, SupportRole.SOCIAL}
        assert covered.isdisjoint(gaps)
        assert covered | gaps == set(SupportRole)
        assert [p.name for p in network.by_role[SupportRole.PRACTICAL].providers] == ["a", "b"]

    def test_empty_network_is_all_gaps(self):
        network = build_support_network([])
        assert network.by_role == {}
        assert [gap.role for gap in network.gaps] == list(SupportRole)
        assert network.gaps[0].recommendation == "Consider building a relationship for Emotional Support"


class TestRelationshipGraph:
    """Tests for build_relationship_graph."""

    def test_star_shape(self):
        persons = [
            make_person("Mum", health_score=9, rel_type=RelationshipType.FAMILY),
            make_person("Jo", health_score=6, rel_type=RelationshipType.COLLEAGUE),
        ]
        graph = build_relationship_graph("owner-1", persons)

        assert len(graph.nodes) == len(persons) + 1
        assert len(graph.links) == len(persons)
        centre = graph.nodes[0]
        assert (centre.id, centre.name, centre.type, centre.health_score) == ("self", "You", "self", 10)
        assert all(link.source == "self" for link in graph.links)
        assert [link.target for link in graph.links] == [p.id for p in persons]
        assert [link.type for link in graph.links] == ["family", "colleague"]

    def test_summary(self):
        persons = [
            make_person("a", health_score=9, rel_type=RelationshipType.FAMILY),
            make_person("b", health_score=6, rel_type=RelationshipType.FAMILY),
            make_person("c", health_score=6, rel_type=RelationshipType.MENTOR),
            make_person("d", health_score=4, rel_type=RelationshipType.FRIEND),
        ]
        graph = build_relationship_graph("owner-1", persons)

        assert graph.summary.total_relationships == 4
        # mean 6.25 -> 6
        assert graph.summary.average_health_score == 6
        assert graph.summary.by_type[RelationshipType.FAMILY] == [persons[0].id, persons[1].id]
        assert graph.summary.by_type[RelationshipType.ROMANTIC] == []
        assert set(graph.summary.by_type) == set(RelationshipType)

    def test_average_rounds_half_up(self):
        persons = [make_person("a", health_score=7), make_person("b", health_score=8)]
        assert build_relationship_graph("owner-1", persons).summary.average_health_score == 8

    def test_empty_graph(self):
        graph = build_relationship_graph("owner-1", [], self_label="Me")
        assert [n.name for n in graph.nodes] == ["Me"]
        assert graph.links == []
        assert graph.summary.total_relationships == 0
        assert graph.summary.average_health_score == 0
