"""
E-commerce Domain Entities

Business entities with identity and lifecycle for the e-commerce domain.
"""

from app.domains.ecommerce.domain.entities.cart import Cart, CartItem
from app.domains.ecommerce.domain.entities.category import Category, slugify
from app.domains.ecommerce.domain.entities.coupon import UNLIMITED, Coupon, normalize_code
from app.domains.ecommerce.domain.entities.order import (
    AppliedCoupon,
    CancelRequest,
    Order,
    OrderItem,
    PaymentDetails,
    ReturnRequest,
    ShippingDetails,
)
from app.domains.ecommerce.domain.entities.product import Nutrition, Product, ProductSize
from app.domains.ecommerce.domain.entities.review import Review

__all__ = [
    "Product",
    "ProductSize",
    "Nutrition",
    "Order",
    "OrderItem",
    "AppliedCoupon",
    "PaymentDetails",
    "ShippingDetails",
    "CancelRequest",
    "ReturnRequest",
    "Coupon",
    "UNLIMITED",
    "normalize_code",
    "Review",
    "Cart",
    "CartItem",
    "Category",
    "slugify",
]
