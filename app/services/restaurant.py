"""
Restaurant Service

Restaurant CRUD, slug handling and weekly operating-hours management.

Usage:
    service = RestaurantService(db)
    restaurant = await service.get_restaurant_by_slug("pizza-palace")
"""

import logging
import re
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.errors import ConflictError, NotFoundError
from app.models import OperatingHours, Restaurant
from app.schemas import OperatingHoursRule, RestaurantCreate, RestaurantUpdate

logger = logging.getLogger(__name__)


class RestaurantService:
    """
    Data access for restaurants and their schedules.

    Args:
        db: Request-scoped async session
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def generate_slug(name: str) -> str:
        """Generate a URL-safe slug from a display name."""
        slug = re.sub(r"[^a-z0-9]+", "-", name.lower())
        return slug.strip("-")

    async def is_slug_available(self, slug: str) -> bool:
        result = await self.db.execute(
            select(func.count(Restaurant.id)).where(Restaurant.slug == slug)
        )
        return (result.scalar() or 0) == 0

    async def create_restaurant(self, data: RestaurantCreate) -> Restaurant:
        """
        Create a restaurant with platform defaults.

        Raises:
            ConflictError: If the slug is already taken
        """
        if not await self.is_slug_available(data.slug):
            raise ConflictError("A restaurant with this slug already exists")

        settings = get_settings()
        restaurant = Restaurant(
            name=data.name,
            slug=data.slug,
            description=data.description,
            email=data.email,
            phone=data.phone,
            timezone=data.timezone or settings.default_timezone,
            currency=(data.currency or "USD").upper(),
            locale=data.locale or "en-US",
            address_line1=data.address_line1,
            address_line2=data.address_line2,
            city=data.city,
            state=data.state,
            postal_code=data.postal_code,
            country=(data.country or "US").upper(),
            is_active=True,
            accepting_orders=True,
            pickup_enabled=True,
            delivery_enabled=False,
            dine_in_enabled=False,
            prep_time_minutes=20,
        )

        self.db.add(restaurant)
        await self.db.commit()
        await self.db.refresh(restaurant)

        logger.info(f"Restaurant created: {restaurant.slug} ({restaurant.id})")
        return restaurant

    async def get_restaurant_by_slug(self, slug: str) -> Restaurant:
        result = await self.db.execute(select(Restaurant).where(Restaurant.slug == slug))
        restaurant = result.scalar_one_or_none()

        if restaurant is None:
            raise NotFoundError("Restaurant not found")
        return restaurant

    async def get_active_restaurant_by_slug(self, slug: str) -> Restaurant:
        """Storefront lookup; a deactivated restaurant is reported as missing."""
        restaurant = await self.get_restaurant_by_slug(slug)
        if not restaurant.is_active:
            raise NotFoundError("Restaurant not found")
        return restaurant

    async def get_restaurant_by_id(self, restaurant_id: str) -> Restaurant:
        restaurant: Optional[Restaurant] = await self.db.get(Restaurant, restaurant_id)

        if restaurant is None:
            raise NotFoundError("Restaurant not found")
        return restaurant

    async def update_restaurant(self, restaurant_id: str, data: RestaurantUpdate) -> Restaurant:
        """Apply the fields present in ``data``; null clears an optional field."""
        restaurant = await self.get_restaurant_by_id(restaurant_id)

        changes = data.changes()
        for key, value in changes.items():
            setattr(restaurant, key, value)

        await self.db.commit()
        await self.db.refresh(restaurant)

        logger.info(f"Restaurant {restaurant.slug} updated: {sorted(changes)}")
        return restaurant

    # =========================================================================
    # OPERATING HOURS
    # =========================================================================

    async def get_operating_hours(self, restaurant_id: str) -> list[OperatingHours]:
        """Schedule rows ordered Sunday first."""
        await self.get_restaurant_by_id(restaurant_id)

        result = await self.db.execute(
            select(OperatingHours)
            .where(OperatingHours.restaurant_id == restaurant_id)
            .order_by(OperatingHours.day_of_week)
        )
        return list(result.scalars().all())

    async def replace_operating_hours(
        self,
        restaurant_id: str,
        rules: list[OperatingHoursRule],
    ) -> list[OperatingHours]:
        """
        Replace the whole weekly schedule in one transaction.

        Args:
            restaurant_id: Restaurant to update
            rules: Validated rules, one per day of week
        """
        await self.get_restaurant_by_id(restaurant_id)

        await self.db.execute(
            delete(OperatingHours).where(OperatingHours.restaurant_id == restaurant_id)
        )
        self.db.add_all([
            OperatingHours(
                restaurant_id=restaurant_id,
                day_of_week=rule.day_of_week,
                open_time=rule.open_time,
                close_time=rule.close_time,
                is_closed=rule.is_closed,
            )
            for rule in rules
        ])
        await self.db.commit()

        logger.info(f"Operating hours replaced for restaurant {restaurant_id} ({len(rules)} days)")
        return await self.get_operating_hours(restaurant_id)
