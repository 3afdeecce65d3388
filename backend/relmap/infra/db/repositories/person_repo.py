"""Person repository implementation."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from relmap.domain.common.errors import PersistenceFailure
from relmap.domain.social.models import Interaction, Person
from relmap.domain.social.repositories import PersonRepository
from relmap.infra.db.models.person import InteractionModel, PersonModel

logger = logging.getLogger(__name__)


class PersonRepositoryImpl(PersonRepository):
    """SQLAlchemy-backed person repository. Each mutation is one commit.

    A person and its interactions are always read in one statement, so a
    reader sees an interaction only together with the count, recency and
    score written in the same commit.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def _storage(self, operation: str) -> AsyncIterator[None]:
        """Roll back and wrap storage errors as PersistenceFailure."""
        try:
            yield
        except SQLAlchemyError as e:
            logger.exception("[PERSON_REPO] %s failed", operation)
            await self.session.rollback()
            raise PersistenceFailure(operation) from e

    def _select_people(self):
        return (
            select(PersonModel)
            .options(joinedload(PersonModel.interactions))
            .execution_options(populate_existing=True)
        )

    async def _get_model(self, owner_id: str, person_id: str, for_update: bool = False) -> Optional[PersonModel]:
        stmt = self._select_people().where(PersonModel.id == person_id, PersonModel.owner_id == owner_id)
        if for_update:
            # Lock only the person row; the interactions side of the outer join is nullable
            stmt = stmt.with_for_update(of=PersonModel)
        result = await self.session.execute(stmt)
        return result.unique().scalar_one_or_none()

    async def create(self, person: Person) -> Person:
        """Persist a new person."""
        async with self._storage("create person"):
            model = PersonModel.from_entity(person)
            self.session.add(model)
            await self.session.commit()
            return model.to_entity()

    async def get(self, owner_id: str, person_id: str, for_update: bool = False) -> Optional[Person]:
        """Get a person scoped to its owner, interactions in insertion order."""
        async with self._storage("get person"):
            model = await self._get_model(owner_id, person_id, for_update=for_update)
            if model is None:
                return None
            return model.to_entity()

    async def list_by_owner(self, owner_id: str) -> list[Person]:
        """List an owner's persons in creation order."""
        async with self._storage("list persons"):
            result = await self.session.execute(
                self._select_people()
                .where(PersonModel.owner_id == owner_id)
                .order_by(PersonModel.pk)
            )
            return [m.to_entity() for m in result.unique().scalars().all()]

    async def update_details(self, person: Person) -> Person:
        """Persist descriptive fields."""
        async with self._storage("update person"):
            model = await self._get_model(person.owner_id, person.id)
            if model is None:
                raise PersistenceFailure("update person")
            model.apply_details(person)
            await self.session.commit()
            return person

    async def append_interaction(self, person: Person, interaction: Interaction) -> None:
        """Insert the interaction row and update the person row in a single commit."""
        async with self._storage("append interaction"):
            model = await self._get_model(person.owner_id, person.id)
            if model is None:
                raise PersistenceFailure("append interaction")
            model.apply_contact_state(person)
            model.interactions.append(InteractionModel.from_entity(interaction))
            await self.session.commit()

    async def update_health_score(self, person: Person) -> None:
        """Persist a recomputed health score."""
        async with self._storage("update health score"):
            model = await self._get_model(person.owner_id, person.id)
            if model is None:
                raise PersistenceFailure("update health score")
            model.health_score = person.health_score
            await self.session.commit()

    async def release(self) -> None:
        """End the current transaction without writing, dropping any row locks."""
        async with self._storage("release"):
            await self.session.rollback()
