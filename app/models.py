"""
SQLAlchemy Database Models

Multi-tenant restaurant platform:
- Restaurants with storefront settings
- Weekly operating hours (one row per day of week)
- Menu categories and items
"""

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


def generate_id() -> str:
    return str(uuid.uuid4())


class Restaurant(Base):
    """
    A tenant of the platform.

    ``timezone`` and ``accepting_orders`` drive the availability evaluator;
    everything else is storefront presentation.
    """
    __tablename__ = "restaurants"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    slug = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    logo_url = Column(String(500), nullable=True)
    cover_image_url = Column(String(500), nullable=True)

    # =========================================================================
    # CONTACT
    # =========================================================================
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)

    # =========================================================================
    # LOCALE
    # =========================================================================
    timezone = Column(String(64), nullable=False, default="America/New_York")
    currency = Column(String(3), nullable=False, default="USD")
    locale = Column(String(16), nullable=False, default="en-US")

    # =========================================================================
    # ADDRESS
    # =========================================================================
    address_line1 = Column(String(255), nullable=True)
    address_line2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    country = Column(String(2), nullable=False, default="US")

    # =========================================================================
    # ORDERING SWITCHES
    # =========================================================================
    is_active = Column(Boolean, nullable=False, default=True)
    accepting_orders = Column(Boolean, nullable=False, default=True)
    pickup_enabled = Column(Boolean, nullable=False, default=True)
    delivery_enabled = Column(Boolean, nullable=False, default=False)
    dine_in_enabled = Column(Boolean, nullable=False, default=False)
    prep_time_minutes = Column(Integer, nullable=False, default=20)

    # =========================================================================
    # BRANDING
    # =========================================================================
    brand_color = Column(String(7), nullable=False, default="#000000")

    # =========================================================================
    # TIMESTAMPS
    # =========================================================================
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Restaurant {self.slug} - {self.timezone}>"


class OperatingHours(Base):
    """
    One day of a restaurant's weekly schedule.

    day_of_week: 0 = Sunday ... 6 = Saturday
    open_time / close_time: "HH:MM", local to the restaurant timezone.
    A close_time earlier than open_time is an overnight shift.
    """
    __tablename__ = "operating_hours"
    __table_args__ = (
        UniqueConstraint("restaurant_id", "day_of_week", name="uq_operating_hours_restaurant_day"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    restaurant_id = Column(
        String(36),
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    day_of_week = Column(Integer, nullable=False)
    open_time = Column(String(5), nullable=False)
    close_time = Column(String(5), nullable=False)
    is_closed = Column(Boolean, nullable=False, default=False)

    def __repr__(self):
        if self.is_closed:
            return f"<OperatingHours day={self.day_of_week} closed>"
        return f"<OperatingHours day={self.day_of_week} {self.open_time}-{self.close_time}>"


class MenuCategory(Base):
    """A section of the menu (Starters, Pizza, Drinks...)."""
    __tablename__ = "menu_categories"

    id = Column(String(36), primary_key=True, default=generate_id)
    restaurant_id = Column(
        String(36),
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    items = relationship(
        "MenuItem",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="MenuItem.sort_order",
    )

    def __repr__(self):
        return f"<MenuCategory {self.name}>"


class MenuItem(Base):
    """A purchasable dish. ``price`` is in minor currency units (cents)."""
    __tablename__ = "menu_items"

    id = Column(String(36), primary_key=True, default=generate_id)
    restaurant_id = Column(
        String(36),
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id = Column(
        String(36),
        ForeignKey("menu_categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Integer, nullable=False)
    image_url = Column(String(500), nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    calories = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_available = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    category = relationship("MenuCategory", back_populates="items")

    def __repr__(self):
        return f"<MenuItem {self.name} - {self.price}>"
