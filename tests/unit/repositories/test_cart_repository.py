"""
Unit tests for the Redis cart repository.
"""

import json
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.core.domain import IntegrationException
from app.domains.ecommerce.domain.entities import Cart, CartItem
from app.domains.ecommerce.infrastructure.repositories import RedisCartRepository


@pytest.fixture
def mock_redis():
    client = AsyncMock()
    client.get.return_value = None
    return client


@pytest.fixture
def repository(mock_redis) -> RedisCartRepository:
    return RedisCartRepository(mock_redis, ttl_seconds=3600)


class TestRedisCartRepository:
    @pytest.mark.asyncio
    async def test_missing_cart_is_empty(self, repository, mock_redis):
        cart = await repository.get("u-1")

        assert cart.user_id == "u-1"
        assert cart.items == []
        mock_redis.get.assert_awaited_once_with("cart:u-1")

    @pytest.mark.asyncio
    async def test_save_refreshes_ttl(self, repository, mock_redis):
        cart = Cart(user_id="u-1", items=[CartItem(product_id="p-1", size="100g", quantity=2, price=Decimal("120"))])

        await repository.save(cart)

        key, body = mock_redis.set.await_args.args
        assert key == "cart:u-1"
        assert mock_redis.set.await_args.kwargs["ex"] == 3600
        assert json.loads(body)["items"][0]["price"] == "120.00"

    @pytest.mark.asyncio
    async def test_reads_stored_bytes(self, repository, mock_redis):
        cart = Cart(user_id="u-1", items=[CartItem(product_id="p-1", size="100g", quantity=2, price=Decimal("120"))])
        mock_redis.get.return_value = json.dumps(cart.to_dict()).encode("utf-8")

        loaded = await repository.get("u-1")

        assert loaded.items[0].quantity == 2
        assert loaded.subtotal == Decimal("240.00")

    @pytest.mark.asyncio
    async def test_redis_failure_maps_to_integration_error(self, repository, mock_redis):
        mock_redis.get.side_effect = RedisConnectionError("down")

        with pytest.raises(IntegrationException):
            await repository.get("u-1")

    @pytest.mark.asyncio
    async def test_delete(self, repository, mock_redis):
        await repository.delete("u-1")

        mock_redis.delete.assert_awaited_once_with("cart:u-1")
