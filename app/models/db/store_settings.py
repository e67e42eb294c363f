"""
Persisted store settings (single row)
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utc_now

STORE_SETTINGS_ID = 1


class StoreSettingsModel(Base):
    """Admin-adjustable store configuration"""

    __tablename__ = "store_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=STORE_SETTINGS_ID)
    shipping_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    free_shipping_threshold: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    updated_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )
