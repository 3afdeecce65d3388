"""Audit event sinks for the relationship map."""
import logging

from redis.exceptions import RedisError

from relmap.domain.common.types import utcnow
from relmap.domain.social.repositories import SocialEventSink
from relmap.infra.messaging.redis_bus import RedisBus

logger = logging.getLogger(__name__)


class RedisEventSink(SocialEventSink):
    """Publishes social events on a Redis channel, fire-and-forget."""

    def __init__(self, bus: RedisBus, channel: str):
        self.bus = bus
        self.channel = channel

    async def emit(self, event_type: str, owner_id: str, payload: dict) -> None:
        message = {
            "type": event_type,
            "pillar": "social",
            "user_id": owner_id,
            "emitted_at": utcnow().isoformat(),
            **payload,
        }
        try:
            await self.bus.publish(self.channel, message)
        except (RedisError, OSError) as e:
            # Events are advisory; the mutation has already been committed.
            logger.warning("[EVENTS] Could not publish %s for user=%s: %s", event_type, owner_id, e)


class NullEventSink(SocialEventSink):
    """Sink used when events are disabled."""

    async def emit(self, event_type: str, owner_id: str, payload: dict) -> None:
        logger.debug("[EVENTS] %s for user=%s (events disabled)", event_type, owner_id)
