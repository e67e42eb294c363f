"""
E-commerce Infrastructure Repositories

Repository implementations for data access.
All repositories implement the ports in app.domains.ecommerce.application.ports
"""

from .analytics_repository import SQLAlchemyAnalyticsRepository
from .cart_repository import RedisCartRepository
from .category_repository import SQLAlchemyCategoryRepository
from .coupon_repository import SQLAlchemyCouponRepository
from .order_repository import SQLAlchemyOrderRepository
from .product_repository import SQLAlchemyProductRepository
from .review_repository import SQLAlchemyReviewRepository
from .store_settings_repository import SQLAlchemyStoreSettingsRepository

__all__ = [
    "SQLAlchemyProductRepository",
    "SQLAlchemyCategoryRepository",
    "SQLAlchemyOrderRepository",
    "SQLAlchemyCouponRepository",
    "SQLAlchemyReviewRepository",
    "SQLAlchemyStoreSettingsRepository",
    "SQLAlchemyAnalyticsRepository",
    "RedisCartRepository",
]
