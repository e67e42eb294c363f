"""
Coupon Repository Implementation

SQLAlchemy implementation of ICouponRepository.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import DuplicateEntityException
from app.domains.ecommerce.application.ports import ICouponRepository
from app.domains.ecommerce.domain.entities import UNLIMITED, Coupon, normalize_code
from app.models.db import CouponModel
from app.models.db.base import utc_now

from ._helpers import ensure_utc, is_unique_violation

logger = logging.getLogger(__name__)


class SQLAlchemyCouponRepository(ICouponRepository):
    """SQLAlchemy implementation of coupon repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, coupon_id: str) -> Coupon | None:
        result = await self.session.execute(
            select(CouponModel).where(CouponModel.id == coupon_id).execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_code(self, code: str) -> Coupon | None:
        result = await self.session.execute(
            select(CouponModel)
            .where(CouponModel.code == normalize_code(code))
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_active(self, now: datetime) -> list[Coupon]:
        """Active coupons inside their validity window that still have uses left."""
        result = await self.session.execute(
            select(CouponModel)
            .where(
                CouponModel.is_active.is_(True),
                CouponModel.valid_from <= now,
                CouponModel.valid_until >= now,
                or_(CouponModel.usage_limit == UNLIMITED, CouponModel.used_count < CouponModel.usage_limit),
            )
            .order_by(CouponModel.valid_until.asc())
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def list_all(self, limit: int = 50, offset: int = 0) -> tuple[list[Coupon], int]:
        total = (await self.session.execute(select(func.count(CouponModel.id)))).scalar_one()
        result = await self.session.execute(
            select(CouponModel)
            .order_by(CouponModel.created_at.desc())
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(m) for m in result.scalars().all()], total

    async def add(self, coupon: Coupon) -> Coupon:
        """Insert a coupon."""
        model = CouponModel(
            id=coupon.id, used_count=coupon.used_count, created_by=coupon.created_by, **self._values(coupon)
        )
        try:
            async with self.session.begin_nested():
                self.session.add(model)
        except IntegrityError as e:
            if is_unique_violation(e):
                raise DuplicateEntityException("Coupon", "code", coupon.code) from e
            raise
        logger.info(f"Coupon created: {coupon.code}")
        return coupon

    async def update(self, coupon: Coupon) -> Coupon:
        """Write editable fields. ``used_count`` is left to ``redeem``."""
        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    update(CouponModel)
                    .where(CouponModel.id == coupon.id)
                    .values(version=CouponModel.version + 1, updated_at=utc_now(), **self._values(coupon))
                    .execution_options(synchronize_session=False)
                )
        except IntegrityError as e:
            if is_unique_violation(e):
                raise DuplicateEntityException("Coupon", "code", coupon.code) from e
            raise
        coupon.version += 1
        return coupon

    async def redeem(self, code: str) -> bool:
        """Count one redemption only while the coupon is under its usage limit."""
        result = await self.session.execute(
            update(CouponModel)
            .where(
                CouponModel.code == normalize_code(code),
                or_(CouponModel.usage_limit == UNLIMITED, CouponModel.used_count < CouponModel.usage_limit),
            )
            .values(used_count=CouponModel.used_count + 1)
            .execution_options(synchronize_session=False)
        )
        redeemed = result.rowcount == 1
        if not redeemed:
            logger.info(f"Coupon redemption refused (limit reached or unknown code): {code}")
        return redeemed

    # Mapping methods

    def _values(self, coupon: Coupon) -> dict[str, Any]:
        return {
            "code": coupon.code,
            "description": coupon.description,
            "discount": coupon.discount,
            "type": coupon.type,
            "categories": list(coupon.categories),
            "min_order_amount": coupon.min_order_amount,
            "max_discount": coupon.max_discount,
            "usage_limit": coupon.usage_limit,
            "valid_from": coupon.valid_from,
            "valid_until": coupon.valid_until,
            "is_active": coupon.is_active,
            "is_first_time_only": coupon.is_first_time_only,
            "applicable_users": list(coupon.applicable_users),
            "excluded_users": list(coupon.excluded_users),
        }

    def _to_entity(self, model: CouponModel) -> Coupon:
        """Convert model to entity."""
        return Coupon(
            id=model.id,
            code=model.code,
            description=model.description,
            discount=Decimal(model.discount),
            type=model.type,
            categories=list(model.categories or []),
            min_order_amount=Decimal(model.min_order_amount),
            max_discount=Decimal(model.max_discount),
            usage_limit=model.usage_limit,
            used_count=model.used_count,
            valid_from=ensure_utc(model.valid_from),
            valid_until=ensure_utc(model.valid_until),
            is_active=model.is_active,
            is_first_time_only=model.is_first_time_only,
            applicable_users=list(model.applicable_users or []),
            excluded_users=list(model.excluded_users or []),
            created_by=model.created_by,
            version=model.version,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )
