"""Tests for the relationship store, interaction recorder and insights service."""
import asyncio

import pytest

from relmap.domain.common.errors import (
    InvalidRelationshipType,
    InvalidSupportRole,
    RelationshipNotFound,
    ValidationError,
)
from relmap.domain.social.models import RelationshipType, SupportRole
from relmap.domain.social.services import InteractionRecorder, RelationshipStore, SocialInsightsService
from relmap.infra.db.repositories.person_repo import PersonRepositoryImpl

OWNER = "owner-1"
OTHER_OWNER = "owner-2"


class CountingPersonRepository(PersonRepositoryImpl):
    """Counts how locked reads are ended."""

    def __init__(self, session):
        super().__init__(session)
        self.score_writes = 0
        self.releases = 0

    async def update_health_score(self, person):
        self.score_writes += 1
        await super().update_health_score(person)

    async def release(self):
        self.releases += 1
        await super().release()


@pytest.fixture
def store(person_repo, event_sink, clock, locks) -> RelationshipStore:
    return RelationshipStore(person_repo, event_sink=event_sink, clock=clock, locks=locks)


@pytest.fixture
def recorder(person_repo, event_sink, clock, locks) -> InteractionRecorder:
    return InteractionRecorder(person_repo, event_sink=event_sink, clock=clock, locks=locks)


@pytest.fixture
def insights(person_repo) -> SocialInsightsService:
    return SocialInsightsService(person_repo)


class TestAddPerson:
    """Tests for adding people."""

    async def test_add_person_defaults(self, store: RelationshipStore, clock):
        person = await store.add_person(OWNER, "Ana", "family", support_roles=["emotional"])

        assert person.owner_id == OWNER
        assert person.relationship_type == RelationshipType.FAMILY
        assert person.support_roles == [SupportRole.EMOTIONAL]
        assert person.health_score == 5
        assert person.contact_count == 0
        assert person.interactions == []
        assert person.last_contact_at == clock.now
        assert person.created_at == clock.now

    async def test_add_person_emits_event(self, store: RelationshipStore, event_sink):
        person = await store.add_person(OWNER, "Ana", "close_friend")

        events = event_sink.of_type("relationship-added")
        assert len(events) == 1
        assert events[0]["content"] == "Added Ana (Close Friend) to your support network"
        assert events[0]["score"] == 5
        assert events[0]["person"]["id"] == person.id
        assert "interactions" not in events[0]["person"]

    async def test_type_and_roles_parsed_leniently(self, store: RelationshipStore):
        person = await store.add_person(
            OWNER, "Bo", "Close-Friend", support_roles=["Practical", "practical", "SOCIAL"]
        )
        assert person.relationship_type == RelationshipType.CLOSE_FRIEND
        assert person.support_roles == [SupportRole.PRACTICAL, SupportRole.SOCIAL]

    async def test_invalid_type_rejected_without_write(self, store: RelationshipStore, event_sink):
        with pytest.raises(InvalidRelationshipType):
            await store.add_person(OWNER, "Cy", "nemesis")

        assert await store.get_relationships(OWNER) == []
        assert event_sink.events == []

    async def test_invalid_role_rejected_without_write(self, store: RelationshipStore):
        with pytest.raises(InvalidSupportRole):
            await store.add_person(OWNER, "Cy", "friend", support_roles=["emotional", "spiritual"])

        assert await store.get_relationships(OWNER) == []

    async def test_blank_name_rejected(self, store: RelationshipStore):
        with pytest.raises(ValidationError):
            await store.add_person(OWNER, "   ", "friend")

    async def test_relationships_in_creation_order(self, store: RelationshipStore):
        names = ["a", "b", "c", "d"]
        for name in names:
            await store.add_person(OWNER, name, "friend")
        await store.add_person(OTHER_OWNER, "x", "friend")

        assert [p.name for p in await store.get_relationships(OWNER)] == names
        assert [p.name for p in await store.get_relationships(OTHER_OWNER)] == ["x"]


class TestUpdatePerson:
    """Tests for updating descriptive fields."""

    async def test_update_descriptive_fields(self, store: RelationshipStore):
        person = await store.add_person(OWNER, "Ana", "family")

        updated = await store.update_person(
            OWNER,
            person.id,
            name="Ana Maria",
            notes="Sister",
            support_roles=["health"],
            contact_frequency_target="daily",
        )

        assert updated.name == "Ana Maria"
        assert updated.notes == "Sister"
        assert updated.support_roles == [SupportRole.HEALTH]
        assert updated.contact_frequency_target == "daily"
        assert updated.health_score == person.health_score

        fetched = await store.get_person(OWNER, person.id)
        assert fetched.name == "Ana Maria"
        assert fetched.support_roles == [SupportRole.HEALTH]

    async def test_partial_update_keeps_other_fields(self, store: RelationshipStore):
        person = await store.add_person(OWNER, "Ana", "family", support_roles=["emotional"], notes="n")

        updated = await store.update_person(OWNER, person.id, notes="new")

        assert updated.name == "Ana"
        assert updated.support_roles == [SupportRole.EMOTIONAL]
        assert updated.notes == "new"

    async def test_update_foreign_person_not_found(self, store: RelationshipStore):
        person = await store.add_person(OWNER, "Ana", "family")
        with pytest.raises(RelationshipNotFound):
            await store.update_person(OTHER_OWNER, person.id, name="Mallory")


class TestRecordInteraction:
    """Tests for recording interactions."""

    async def test_record_updates_count_recency_and_score(
        self, store: RelationshipStore, recorder: InteractionRecorder, clock
    ):
        person = await store.add_person(OWNER, "Ana", "family")
        clock.advance(days=3)

        interaction = await recorder.record_interaction(
            OWNER, person.id, type="coffee", duration_minutes=45, quality_score=9, topics=["work", " work ", ""]
        )

        assert interaction.type == "coffee"
        assert interaction.timestamp == clock.now
        assert interaction.topics == ["work"]

        stored = await store.get_person(OWNER, person.id)
        assert stored.contact_count == 1
        assert stored.last_contact_at == clock.now
        assert [i.id for i in stored.interactions] == [interaction.id]
        # 5 + (9-5)/2 + 2
        assert stored.health_score == 9

    async def test_record_emits_event(
        self, store: RelationshipStore, recorder: InteractionRecorder, event_sink
    ):
        person = await store.add_person(OWNER, "Ana", "family")
        await recorder.record_interaction(OWNER, person.id, type="call", duration_minutes=20, quality_score=6)

        events = event_sink.of_type("interaction")
        assert len(events) == 1
        assert events[0]["content"] == "call with Ana (20 min)"
        assert events[0]["score"] == 6

    async def test_contact_count_matches_interactions(
        self, store: RelationshipStore, recorder: InteractionRecorder, clock
    ):
        person = await store.add_person(OWNER, "Ana", "family")
        for quality in [2, 4, 6, 8, 10]:
            clock.advance(hours=1)
            await recorder.record_interaction(OWNER, person.id, quality_score=quality)

        stored = await store.get_person(OWNER, person.id)
        assert stored.contact_count == len(stored.interactions) == 5
        assert [i.quality_score for i in stored.interactions] == [2, 4, 6, 8, 10]
        # last three: mean 8 -> +1.5, recent -> +2, 8.5 -> 9
        assert stored.health_score == 9

    async def test_concurrent_records_on_one_person(
        self, store: RelationshipStore, recorder: InteractionRecorder, locks
    ):
        person = await store.add_person(OWNER, "Ana", "family")

        await asyncio.gather(
            *[recorder.record_interaction(OWNER, person.id, quality_score=5) for _ in range(10)]
        )

        stored = await store.get_person(OWNER, person.id)
        assert stored.contact_count == 10
        assert len(stored.interactions) == 10
        assert len({i.id for i in stored.interactions}) == 10
        assert stored.health_score == 7
        assert len(locks) == 0

    async def test_recency_never_moves_backwards(
        self, store: RelationshipStore, recorder: InteractionRecorder, clock
    ):
        person = await store.add_person(OWNER, "Ana", "family")
        clock.advance(days=10)
        await recorder.record_interaction(OWNER, person.id)
        latest = clock.now

        clock.advance(days=-5)
        await recorder.record_interaction(OWNER, person.id)

        stored = await store.get_person(OWNER, person.id)
        assert stored.last_contact_at == latest

    async def test_foreign_owner_cannot_record(
        self, store: RelationshipStore, recorder: InteractionRecorder, event_sink
    ):
        person = await store.add_person(OWNER, "Ana", "family")

        with pytest.raises(RelationshipNotFound):
            await recorder.record_interaction(OTHER_OWNER, person.id)

        stored = await store.get_person(OWNER, person.id)
        assert stored.contact_count == 0
        assert event_sink.of_type("interaction") == []

    async def test_unknown_person(self, recorder: InteractionRecorder):
        with pytest.raises(RelationshipNotFound) as exc_info:
            await recorder.record_interaction(OWNER, "missing")
        assert str(exc_info.value) == "Relationship with id missing not found"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"quality_score": 0},
            {"quality_score": 11},
            {"duration_minutes": -1},
            {"type": "  "},
        ],
    )
    async def test_invalid_interaction_rejected_without_write(
        self, store: RelationshipStore, recorder: InteractionRecorder, kwargs
    ):
        person = await store.add_person(OWNER, "Ana", "family")

        with pytest.raises(ValidationError):
            await recorder.record_interaction(OWNER, person.id, **kwargs)

        stored = await store.get_person(OWNER, person.id)
        assert stored.contact_count == 0
        assert stored.interactions == []


class TestRefreshHealthScores:
    """Tests for time decay without new contact."""

    async def test_refresh_applies_decay(
        self, store: RelationshipStore, recorder: InteractionRecorder, clock
    ):
        person = await store.add_person(OWNER, "Ana", "family")
        clock.advance(days=200)

        refreshed = await recorder.refresh_health_scores(OWNER)

        assert [p.id for p in refreshed] == [person.id]
        assert refreshed[0].health_score == 3
        assert (await store.get_person(OWNER, person.id)).health_score == 3

    async def test_refresh_scoped_to_owner(
        self, store: RelationshipStore, recorder: InteractionRecorder, clock
    ):
        mine = await store.add_person(OWNER, "Ana", "family")
        theirs = await store.add_person(OTHER_OWNER, "Bo", "friend")
        clock.advance(days=200)

        await recorder.refresh_health_scores(OWNER)

        assert (await store.get_person(OWNER, mine.id)).health_score == 3
        assert (await store.get_person(OTHER_OWNER, theirs.id)).health_score == 5

    async def test_unchanged_scores_release_row_locks(self, db_session, store: RelationshipStore, clock, locks):
        """Every locked read ends its transaction, by a score write or by a release."""
        repo = CountingPersonRepository(db_session)
        recorder = InteractionRecorder(repo, clock=clock, locks=locks)
        await store.add_person(OWNER, "Ana", "family")
        await store.add_person(OWNER, "Bo", "friend")
        clock.advance(days=200)

        await recorder.refresh_health_scores(OWNER)
        assert (repo.score_writes, repo.releases) == (2, 0)

        await recorder.refresh_health_scores(OWNER)
        assert (repo.score_writes, repo.releases) == (2, 2)

    async def test_not_found_releases_row_locks(self, db_session, clock, locks):
        repo = CountingPersonRepository(db_session)
        recorder = InteractionRecorder(repo, clock=clock, locks=locks)

        with pytest.raises(RelationshipNotFound):
            await recorder.record_interaction(OWNER, "missing")
        assert repo.releases == 1


class TestInsights:
    """Tests for the insights service against stored relationships."""

    async def test_projections(
        self,
        store: RelationshipStore,
        recorder: InteractionRecorder,
        insights: SocialInsightsService,
    ):
        close = await store.add_person(OWNER, "Ana", "family", support_roles=["emotional", "health"])
        await store.add_person(OWNER, "Bo", "colleague", support_roles=["professional"])
        await recorder.record_interaction(OWNER, close.id, quality_score=10)

        circles = await insights.get_social_circles(OWNER)
        assert [p.name for p in circles.inner.members] == ["Ana"]
        assert [p.name for p in circles.middle.members] == ["Bo"]

        network = await insights.get_support_network(OWNER)
        assert set(network.by_role) == {SupportRole.EMOTIONAL, SupportRole.HEALTH, SupportRole.PROFESSIONAL}
        assert {g.role for g in network.gaps} == {SupportRole.PRACTICAL, SupportRole.FINANCIAL, SupportRole.SOCIAL}

        graph = await insights.get_relationship_graph(OWNER)
        assert graph.summary.total_relationships == 2
        assert len(graph.nodes) == 3

        # mean 7.5 rounds to 8: 5 + 0 + (8-5)/2 + 3/3 = 7.5
        assert await insights.get_social_score(OWNER) == 8

    async def test_empty_owner(self, insights: SocialInsightsService):
        graph = await insights.get_relationship_graph(OTHER_OWNER)
        assert graph.summary.total_relationships == 0
        assert graph.summary.average_health_score == 0
        assert len((await insights.get_support_network(OTHER_OWNER)).gaps) == len(SupportRole)
