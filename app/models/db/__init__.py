"""
Database models package - Organized by responsibility
"""

from .base import Base, JSONType, TimestampMixin
from .catalog import CategoryModel, ProductModel, ProductSizeModel
from .coupons import CouponModel
from .orders import OrderModel, OrderSequenceModel
from .reviews import ReviewModel
from .store_settings import STORE_SETTINGS_ID, StoreSettingsModel

__all__ = [
    "Base",
    "JSONType",
    "TimestampMixin",
    "ProductModel",
    "ProductSizeModel",
    "CategoryModel",
    "OrderModel",
    "OrderSequenceModel",
    "CouponModel",
    "ReviewModel",
    "StoreSettingsModel",
    "STORE_SETTINGS_ID",
]
