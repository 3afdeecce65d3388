"""Social domain services."""
import logging
from datetime import datetime
from typing import Callable, Optional

from relmap.domain.common.errors import RelationshipNotFound, ValidationError
from relmap.domain.common.types import as_utc, utcnow
from relmap.domain.social.catalog import relationship_type_info
from relmap.domain.social.locks import KeyedLockRegistry, relationship_locks
from relmap.domain.social.models import Interaction, Person, RelationshipType, SupportRole
from relmap.domain.social.projections import (
    RelationshipGraph,
    SocialCircles,
    SupportNetwork,
    build_relationship_graph,
    build_support_network,
    classify_circles,
)
from relmap.domain.social.repositories import PersonRepository, SocialEventSink
from relmap.domain.social.scoring import calculate_social_score, compute_health_score

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

MIN_QUALITY_SCORE = 1
MAX_QUALITY_SCORE = 10


async def _emit(sink: Optional[SocialEventSink], event_type: str, owner_id: str, payload: dict) -> None:
    if sink is not None:
        await sink.emit(event_type, owner_id, payload)


def _require_text(value: Optional[str], field_name: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field_name} must not be empty")
    return text


class RelationshipStore:
    """Creates, reads and updates the people in an owner's relationship map."""

    def __init__(
        self,
        person_repo: PersonRepository,
        event_sink: Optional[SocialEventSink] = None,
        clock: Clock = utcnow,
        locks: KeyedLockRegistry = relationship_locks,
    ):
        self.person_repo = person_repo
        self.event_sink = event_sink
        self.clock = clock
        self.locks = locks

    async def add_person(
        self,
        owner_id: str,
        name: str,
        relationship_type,
        support_roles: Optional[list] = None,
        notes: str = "",
        contact_frequency_target: str = "weekly",
    ) -> Person:
        """Add a person to the owner's map with the default health score."""
        rel_type = RelationshipType.parse(relationship_type)
        roles = SupportRole.parse_many(support_roles)
        name = _require_text(name, "name")

        person = Person.create(
            owner_id=owner_id,
            name=name,
            relationship_type=rel_type,
            now=self.clock(),
            support_roles=roles,
            notes=notes or "",
            contact_frequency_target=contact_frequency_target or "weekly",
        )
        created = await self.person_repo.create(person)
        logger.info(f"[SOCIAL] Person added: owner={owner_id}, person={created.id}, type={rel_type.value}")

        label = relationship_type_info(rel_type).label
        await _emit(
            self.event_sink,
            "relationship-added",
            owner_id,
            {
                "content": f"Added {created.name} ({label}) to your support network",
                "score": created.health_score,
                "person": created.model_dump(mode="json", exclude={"interactions"}),
            },
        )
        return created

    async def get_relationships(self, owner_id: str) -> list[Person]:
        """All relationships of the owner in creation order."""
        return await self.person_repo.list_by_owner(owner_id)

    async def get_person(self, owner_id: str, person_id: str) -> Person:
        person = await self.person_repo.get(owner_id, person_id)
        if person is None:
            raise RelationshipNotFound(person_id)
        return person

    async def update_person(
        self,
        owner_id: str,
        person_id: str,
        *,
        name: Optional[str] = None,
        notes: Optional[str] = None,
        support_roles: Optional[list] = None,
        contact_frequency_target: Optional[str] = None,
    ) -> Person:
        """Update descriptive fields. Score, counts and recency are never touched here."""
        roles = SupportRole.parse_many(support_roles) if support_roles is not None else None
        new_name = _require_text(name, "name") if name is not None else None

        async with self.locks.hold((owner_id, person_id)):
            person = await self.person_repo.get(owner_id, person_id, for_update=True)
            if person is None:
                await self.person_repo.release()
                raise RelationshipNotFound(person_id)
            if new_name is not None:
                person.name = new_name
            if notes is not None:
                person.notes = notes
            if roles is not None:
                person.support_roles = roles
            if contact_frequency_target is not None:
                person.contact_frequency_target = contact_frequency_target
            updated = await self.person_repo.update_details(person)

        logger.info(f"[SOCIAL] Person updated: owner={owner_id}, person={person_id}")
        return updated


class InteractionRecorder:
    """Records interactions and is the only writer of health scores.

    Every mutation of one relationship (append, recency update, score
    recompute, persist) runs inside a lock keyed by (owner_id, person_id).
    """

    def __init__(
        self,
        person_repo: PersonRepository,
        event_sink: Optional[SocialEventSink] = None,
        clock: Clock = utcnow,
        locks: KeyedLockRegistry = relationship_locks,
    ):
        self.person_repo = person_repo
        self.event_sink = event_sink
        self.clock = clock
        self.locks = locks

    async def record_interaction(
        self,
        owner_id: str,
        person_id: str,
        type: str = "call",
        duration_minutes: int = 30,
        quality_score: int = 5,
        notes: str = "",
        topics: Optional[list[str]] = None,
    ) -> Interaction:
        """Append an interaction and recompute the person's health score."""
        interaction_type = _require_text(type, "type")
        if duration_minutes < 0:
            raise ValidationError("duration_minutes must be >= 0")
        if not MIN_QUALITY_SCORE <= quality_score <= MAX_QUALITY_SCORE:
            raise ValidationError(
                f"quality_score must be between {MIN_QUALITY_SCORE} and {MAX_QUALITY_SCORE}"
            )
        clean_topics: list[str] = []
        for topic in topics or []:
            topic = topic.strip()
            if topic and topic not in clean_topics:
                clean_topics.append(topic)

        async with self.locks.hold((owner_id, person_id)):
            person = await self.person_repo.get(owner_id, person_id, for_update=True)
            if person is None:
                await self.person_repo.release()
                raise RelationshipNotFound(person_id)

            now = self.clock()
            interaction = Interaction.create(
                person_id=person.id,
                timestamp=now,
                type=interaction_type,
                duration_minutes=duration_minutes,
                quality_score=quality_score,
                notes=notes or "",
                topics=clean_topics,
            )
            person.interactions.append(interaction)
            person.contact_count += 1
            person.last_contact_at = max(as_utc(person.last_contact_at), as_utc(now))
            person.health_score = compute_health_score(person, now)

            await self.person_repo.append_interaction(person, interaction)

        logger.info(
            f"[SOCIAL] Interaction recorded: owner={owner_id}, person={person_id}, "
            f"contacts={person.contact_count}, health={person.health_score}"
        )
        await _emit(
            self.event_sink,
            "interaction",
            owner_id,
            {
                "content": f"{interaction.type} with {person.name} ({interaction.duration_minutes} min)",
                "score": interaction.quality_score,
                "interaction": interaction.model_dump(mode="json"),
                "health_score": person.health_score,
            },
        )
        return interaction

    async def refresh_health_scores(self, owner_id: str, now: Optional[datetime] = None) -> list[Person]:
        """Recompute every relationship's score against `now` so time decay shows without new contact."""
        now = now or self.clock()
        refreshed: list[Person] = []
        for listed in await self.person_repo.list_by_owner(owner_id):
            async with self.locks.hold((owner_id, listed.id)):
                person = await self.person_repo.get(owner_id, listed.id, for_update=True)
                if person is None:
                    await self.person_repo.release()
                    continue
                score = compute_health_score(person, now)
                if score != person.health_score:
                    logger.info(
                        f"[SOCIAL] Health score decayed: owner={owner_id}, person={person.id}, "
                        f"{person.health_score} -> {score}"
                    )
                    person.health_score = score
                    await self.person_repo.update_health_score(person)
                else:
                    await self.person_repo.release()
                refreshed.append(person)
        return refreshed


class SocialInsightsService:
    """Read-side projections computed on demand from stored relationships."""

    def __init__(self, person_repo: PersonRepository, self_label: str = "You"):
        self.person_repo = person_repo
        self.self_label = self_label

    async def get_relationship_graph(self, owner_id: str) -> RelationshipGraph:
        persons = await self.person_repo.list_by_owner(owner_id)
        return build_relationship_graph(owner_id, persons, self_label=self.self_label)

    async def get_social_circles(self, owner_id: str) -> SocialCircles:
        persons = await self.person_repo.list_by_owner(owner_id)
        return classify_circles(persons)

    async def get_support_network(self, owner_id: str) -> SupportNetwork:
        persons = await self.person_repo.list_by_owner(owner_id)
        return build_support_network(persons)

    async def get_social_score(self, owner_id: str) -> int:
        persons = await self.person_repo.list_by_owner(owner_id)
        return calculate_social_score(persons)
