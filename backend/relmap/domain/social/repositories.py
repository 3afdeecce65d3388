"""Social domain repository protocols."""
from typing import Optional, Protocol

from relmap.domain.social.models import Interaction, Person


class PersonRepository(Protocol):
    """Per-owner storage of people and their interactions.

    Implementations raise PersistenceFailure for storage errors.
    """

    async def create(self, person: Person) -> Person:
        """Persist a new person."""
        ...

    async def get(self, owner_id: str, person_id: str, for_update: bool = False) -> Optional[Person]:
        """Get a person with its interactions, or None if missing or owned by someone else.

        With for_update the row stays locked until the next commit.
        """
        ...

    async def list_by_owner(self, owner_id: str) -> list[Person]:
        """All persons of an owner in creation order, interactions included."""
        ...

    async def update_details(self, person: Person) -> Person:
        """Persist descriptive fields (name, notes, support roles, frequency target)."""
        ...

    async def append_interaction(self, person: Person, interaction: Interaction) -> None:
        """Insert the interaction and store the person's recency, count and score in one commit."""
        ...

    async def update_health_score(self, person: Person) -> None:
        """Persist a recomputed health score."""
        ...

    async def release(self) -> None:
        """End a read taken with for_update without writing anything."""
        ...


class SocialEventSink(Protocol):
    """Fire-and-forget audit sink. Must never raise."""

    async def emit(self, event_type: str, owner_id: str, payload: dict) -> None:
        ...
