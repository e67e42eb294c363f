"""
Shipping Value Objects for E-commerce Domain

Shipping fee configuration and the delivery address captured on an order.
"""

import re
from dataclasses import dataclass
from decimal import Decimal

from app.core.domain import ValidationException, ValueObject, to_money

PINCODE_PATTERN = re.compile(r"^\d{6}$")
PHONE_PATTERN = re.compile(r"^[0-9+\-\s()]{10,15}$")


@dataclass(frozen=True)
class ShippingConfig(ValueObject):
    """
    Flat shipping fee waived above a subtotal threshold.

    Loaded from the persisted store settings for each checkout and passed
    explicitly into the total calculation.
    """

    flat_fee: Decimal
    free_shipping_threshold: Decimal

    def _validate(self) -> None:
        object.__setattr__(self, "flat_fee", to_money(self.flat_fee))
        object.__setattr__(self, "free_shipping_threshold", to_money(self.free_shipping_threshold))
        if self.flat_fee < 0:
            raise ValidationException("Shipping fee cannot be negative", field="shipping_fee")
        if self.free_shipping_threshold < 0:
            raise ValidationException(
                "Free shipping threshold cannot be negative", field="free_shipping_threshold"
            )

    def fee_for(self, subtotal: Decimal) -> Decimal:
        """Shipping cost charged for an order with the given subtotal."""
        if subtotal >= self.free_shipping_threshold:
            return to_money(0)
        return self.flat_fee


@dataclass(frozen=True)
class ShippingAddress(ValueObject):
    """Delivery address stored on an order."""

    first_name: str
    last_name: str
    address: str
    city: str
    state: str
    pincode: str
    phone: str

    def _validate(self) -> None:
        for name in ("first_name", "last_name", "address", "city", "state"):
            if not getattr(self, name).strip():
                raise ValidationException(f"{name.replace('_', ' ').capitalize()} is required", field=name)
        if not PINCODE_PATTERN.match(self.pincode):
            raise ValidationException("Pincode must be 6 digits", field="pincode")
        if not PHONE_PATTERN.match(self.phone):
            raise ValidationException("Invalid phone number", field="phone")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> dict[str, str]:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "pincode": self.pincode,
            "phone": self.phone,
        }
