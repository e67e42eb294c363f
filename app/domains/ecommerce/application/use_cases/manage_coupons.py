"""
Manage Coupons Use Cases

Coupon administration and the public list of currently offered coupons.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from app.core.domain import EntityNotFoundException, generate_uuid_str, utc_now
from app.domains.ecommerce.application.ports import ICouponRepository, ITransaction
from app.domains.ecommerce.domain.entities import UNLIMITED, Coupon
from app.domains.ecommerce.domain.value_objects import DiscountType

logger = logging.getLogger(__name__)


@dataclass
class CouponInput:
    """Editable coupon fields."""

    code: str
    discount: Decimal
    type: DiscountType
    valid_from: datetime
    valid_until: datetime
    description: str = ""
    categories: list[str] = field(default_factory=list)
    min_order_amount: Decimal = Decimal("0")
    max_discount: Decimal = Decimal(UNLIMITED)
    usage_limit: int = UNLIMITED
    is_active: bool = True
    is_first_time_only: bool = False
    applicable_users: list[str] = field(default_factory=list)
    excluded_users: list[str] = field(default_factory=list)


def _coupon_fields(data: CouponInput) -> dict:
    return {
        "code": data.code,
        "description": data.description.strip(),
        "discount": data.discount,
        "type": data.type,
        "categories": list(data.categories),
        "min_order_amount": data.min_order_amount,
        "max_discount": data.max_discount,
        "usage_limit": data.usage_limit,
        "valid_from": data.valid_from,
        "valid_until": data.valid_until,
        "is_active": data.is_active,
        "is_first_time_only": data.is_first_time_only,
        "applicable_users": list(data.applicable_users),
        "excluded_users": list(data.excluded_users),
    }


class CreateCouponUseCase:
    """
    Use Case: Create Coupon

    Codes are stored uppercase; a taken code raises DuplicateEntityException.
    """

    def __init__(self, coupon_repository: ICouponRepository, transaction: ITransaction):
        self.coupon_repository = coupon_repository
        self.transaction = transaction

    async def execute(self, data: CouponInput, created_by: str | None = None) -> Coupon:
        coupon = Coupon(id=generate_uuid_str(), created_by=created_by, **_coupon_fields(data))
        try:
            await self.coupon_repository.add(coupon)
            await self.transaction.commit()
        except Exception:
            await self.transaction.rollback()
            raise
        return coupon


class UpdateCouponUseCase:
    """Use Case: Update Coupon (the redemption count is preserved)"""

    def __init__(self, coupon_repository: ICouponRepository, transaction: ITransaction):
        self.coupon_repository = coupon_repository
        self.transaction = transaction

    async def execute(self, coupon_id: str, data: CouponInput) -> Coupon:
        current = await self.coupon_repository.get_by_id(coupon_id)
        if current is None:
            raise EntityNotFoundException("Coupon", coupon_id)

        coupon = Coupon(
            id=current.id,
            used_count=current.used_count,
            created_by=current.created_by,
            version=current.version,
            created_at=current.created_at,
            updated_at=utc_now(),
            **_coupon_fields(data),
        )
        try:
            await self.coupon_repository.update(coupon)
            await self.transaction.commit()
        except Exception:
            await self.transaction.rollback()
            raise
        logger.info(f"Coupon updated: {coupon.code}")
        return coupon


class DeactivateCouponUseCase:
    """Use Case: Deactivate Coupon (coupons are never deleted)"""

    def __init__(self, coupon_repository: ICouponRepository, transaction: ITransaction):
        self.coupon_repository = coupon_repository
        self.transaction = transaction

    async def execute(self, coupon_id: str) -> Coupon:
        coupon = await self.coupon_repository.get_by_id(coupon_id)
        if coupon is None:
            raise EntityNotFoundException("Coupon", coupon_id)
        coupon.deactivate()
        try:
            await self.coupon_repository.update(coupon)
            await self.transaction.commit()
        except Exception:
            await self.transaction.rollback()
            raise
        logger.info(f"Coupon deactivated: {coupon.code}")
        return coupon


class ListActiveCouponsUseCase:
    """Use Case: List Active Coupons (public)"""

    def __init__(self, coupon_repository: ICouponRepository):
        self.coupon_repository = coupon_repository

    async def execute(self, now: datetime | None = None) -> list[Coupon]:
        return await self.coupon_repository.list_active(now or utc_now())


class ListCouponsUseCase:
    """Use Case: List Coupons (admin)"""

    def __init__(self, coupon_repository: ICouponRepository):
        self.coupon_repository = coupon_repository

    async def execute(self, limit: int = 50, offset: int = 0) -> tuple[list[Coupon], int]:
        return await self.coupon_repository.list_all(limit=limit, offset=offset)


__all__ = [
    "CouponInput",
    "CreateCouponUseCase",
    "UpdateCouponUseCase",
    "DeactivateCouponUseCase",
    "ListActiveCouponsUseCase",
    "ListCouponsUseCase",
]
