"""API dependencies."""
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from relmap.domain.social.repositories import PersonRepository, SocialEventSink
from relmap.domain.social.services import InteractionRecorder, RelationshipStore, SocialInsightsService
from relmap.infra.db.repositories.person_repo import PersonRepositoryImpl
from relmap.infra.db.session import get_db
from relmap.infra.messaging.events import NullEventSink, RedisEventSink
from relmap.infra.messaging.redis_bus import redis_bus
from relmap.settings import settings


async def get_current_owner_id(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
) -> str:
    """Owner id as validated and forwarded by the upstream identity provider."""
    owner_id = (x_user_id or "").strip()
    if not owner_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return owner_id


def get_event_sink() -> SocialEventSink:
    if settings.social_events_enabled:
        return RedisEventSink(redis_bus, settings.social_events_channel)
    return NullEventSink()


def get_person_repository(db: AsyncSession = Depends(get_db)) -> PersonRepository:
    return PersonRepositoryImpl(db)


def get_relationship_store(
    repo: PersonRepository = Depends(get_person_repository),
    sink: SocialEventSink = Depends(get_event_sink),
) -> RelationshipStore:
    return RelationshipStore(repo, event_sink=sink)


def get_interaction_recorder(
    repo: PersonRepository = Depends(get_person_repository),
    sink: SocialEventSink = Depends(get_event_sink),
) -> InteractionRecorder:
    return InteractionRecorder(repo, event_sink=sink)


def get_insights_service(
    repo: PersonRepository = Depends(get_person_repository),
) -> SocialInsightsService:
    return SocialInsightsService(repo, self_label=settings.graph_self_label)
