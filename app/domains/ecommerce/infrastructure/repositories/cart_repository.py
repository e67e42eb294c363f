"""
Cart Repository Implementation

Stores each user's cart as one JSON document in Redis with an idle TTL.
"""

import json
import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from app.core.domain import IntegrationException
from app.domains.ecommerce.application.ports import ICartRepository
from app.domains.ecommerce.domain.entities import Cart

logger = logging.getLogger(__name__)


class RedisCartRepository(ICartRepository):
    """
    Redis implementation of the cart store.

    Keys are ``<prefix>:<user_id>``. Every save refreshes the TTL, so only
    idle carts expire.
    """

    def __init__(self, client: aioredis.Redis, prefix: str = "cart", ttl_seconds: int | None = None):
        self.client = client
        self.prefix = prefix
        self.ttl_seconds = ttl_seconds

    def _get_key(self, user_id: str) -> str:
        return f"{self.prefix}:{user_id}"

    async def get(self, user_id: str) -> Cart:
        try:
            data = await self.client.get(self._get_key(user_id))
        except RedisError as e:
            logger.error(f"Error reading cart for user {user_id}: {e}")
            raise IntegrationException("redis", "Cart store is unavailable", e) from e

        if not data:
            return Cart(user_id=user_id)
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return Cart.from_dict(json.loads(data))

    async def save(self, cart: Cart) -> None:
        try:
            await self.client.set(self._get_key(cart.user_id), json.dumps(cart.to_dict()), ex=self.ttl_seconds)
        except RedisError as e:
            logger.error(f"Error saving cart for user {cart.user_id}: {e}")
            raise IntegrationException("redis", "Cart store is unavailable", e) from e

    async def delete(self, user_id: str) -> None:
        try:
            await self.client.delete(self._get_key(user_id))
        except RedisError as e:
            logger.error(f"Error deleting cart for user {user_id}: {e}")
            raise IntegrationException("redis", "Cart store is unavailable", e) from e
