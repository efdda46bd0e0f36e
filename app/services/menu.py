"""
Menu Service

Category and item management plus the public menu payload consumed by the
storefront page and the ``/menu`` endpoint.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.errors import NotFoundError
from app.models import MenuCategory, MenuItem, OperatingHours, Restaurant
from app.schemas import MenuCategoryCreate, MenuCategoryUpdate, MenuItemCreate, MenuItemUpdate
from app.services.hours import AvailabilityStatus, availability_status
from app.services.restaurant import RestaurantService

logger = logging.getLogger(__name__)


@dataclass
class PublicMenu:
    """
    A restaurant's storefront data at one instant.

    ``categories`` holds only active categories, each with only its active
    items, both in sort order.
    """
    restaurant: Restaurant
    operating_hours: list[OperatingHours]
    categories: list[dict]
    availability: AvailabilityStatus


class MenuService:
    """
    Data access for menu categories and items.

    Args:
        db: Request-scoped async session
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.restaurants = RestaurantService(db)

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    async def create_category(self, restaurant_id: str, data: MenuCategoryCreate) -> MenuCategory:
        await self.restaurants.get_restaurant_by_id(restaurant_id)

        category = MenuCategory(restaurant_id=restaurant_id, **data.model_dump())
        self.db.add(category)
        await self.db.commit()
        await self.db.refresh(category)

        logger.info(f"Category '{category.name}' created for restaurant {restaurant_id}")
        return category

    async def list_categories(self, restaurant_id: str) -> list[MenuCategory]:
        await self.restaurants.get_restaurant_by_id(restaurant_id)

        result = await self.db.execute(
            select(MenuCategory)
            .where(MenuCategory.restaurant_id == restaurant_id)
            .order_by(MenuCategory.sort_order)
        )
        return list(result.scalars().all())

    async def get_category(self, category_id: str, restaurant_id: str) -> MenuCategory:
        result = await self.db.execute(
            select(MenuCategory).where(
                MenuCategory.id == category_id,
                MenuCategory.restaurant_id == restaurant_id,
            )
        )
        category = result.scalar_one_or_none()

        if category is None:
            raise NotFoundError("Category not found")
        return category

    async def update_category(
        self,
        category_id: str,
        restaurant_id: str,
        data: MenuCategoryUpdate,
    ) -> MenuCategory:
        category = await self.get_category(category_id, restaurant_id)

        changes = data.changes()
        for key, value in changes.items():
            setattr(category, key, value)

        await self.db.commit()
        await self.db.refresh(category)

        logger.info(f"Category {category_id} updated: {sorted(changes)}")
        return category

    async def delete_category(self, category_id: str, restaurant_id: str) -> None:
        """Delete a category together with its items."""
        await self.get_category(category_id, restaurant_id)

        await self.db.execute(delete(MenuItem).where(MenuItem.category_id == category_id))
        await self.db.execute(delete(MenuCategory).where(MenuCategory.id == category_id))
        await self.db.commit()

        logger.info(f"Category {category_id} deleted from restaurant {restaurant_id}")

    # =========================================================================
    # ITEMS
    # =========================================================================

    async def create_item(self, restaurant_id: str, data: MenuItemCreate) -> MenuItem:
        """
        Create a menu item.

        Raises:
            NotFoundError: If the category does not belong to the restaurant
        """
        await self.get_category(data.category_id, restaurant_id)

        item = MenuItem(restaurant_id=restaurant_id, **data.model_dump())
        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)

        logger.info(f"Item '{item.name}' created in category {item.category_id}")
        return item

    async def get_item(self, item_id: str, restaurant_id: str) -> MenuItem:
        result = await self.db.execute(
            select(MenuItem).where(
                MenuItem.id == item_id,
                MenuItem.restaurant_id == restaurant_id,
            )
        )
        item = result.scalar_one_or_none()

        if item is None:
            raise NotFoundError("Item not found")
        return item

    async def update_item(self, item_id: str, restaurant_id: str, data: MenuItemUpdate) -> MenuItem:
        """
        Apply a partial update to an item.

        Raises:
            NotFoundError: If the item, or the category it moves to, does not
                belong to the restaurant
        """
        item = await self.get_item(item_id, restaurant_id)

        changes = data.changes()
        if changes.get("category_id", item.category_id) != item.category_id:
            await self.get_category(changes["category_id"], restaurant_id)

        for key, value in changes.items():
            setattr(item, key, value)

        await self.db.commit()
        await self.db.refresh(item)

        logger.info(f"Item {item_id} updated: {sorted(changes)}")
        return item

    async def delete_item(self, item_id: str, restaurant_id: str) -> None:
        """Soft delete: the row stays so past orders can still reference it."""
        item = await self.get_item(item_id, restaurant_id)

        item.is_active = False
        await self.db.commit()

        logger.info(f"Item {item_id} deactivated")

    async def set_item_availability(
        self,
        item_id: str,
        restaurant_id: str,
        is_available: bool,
    ) -> MenuItem:
        """Mark an item sold out (or back in stock) without hiding it."""
        item = await self.get_item(item_id, restaurant_id)

        item.is_available = is_available
        await self.db.commit()
        await self.db.refresh(item)

        logger.info(f"Item {item_id} availability set to {is_available}")
        return item

    async def get_public_menu(self, slug: str, as_of: Optional[datetime] = None) -> PublicMenu:
        """
        Load everything the storefront renders for ``slug``.

        Raises:
            NotFoundError: Unknown slug or deactivated restaurant
        """
        restaurant = await self.restaurants.get_active_restaurant_by_slug(slug)

        hours = await self.restaurants.get_operating_hours(restaurant.id)

        result = await self.db.execute(
            select(MenuCategory)
            .where(
                MenuCategory.restaurant_id == restaurant.id,
                MenuCategory.is_active.is_(True),
            )
            .order_by(MenuCategory.sort_order)
            .options(selectinload(MenuCategory.items))
        )
        categories = [
            {
                "id": category.id,
                "name": category.name,
                "description": category.description,
                "image_url": category.image_url,
                "sort_order": category.sort_order,
                "is_active": category.is_active,
                "items": [item for item in category.items if item.is_active],
            }
            for category in result.scalars().all()
        ]

        logger.debug(f"Public menu loaded for {slug}: {len(categories)} categories")

        return PublicMenu(
            restaurant=restaurant,
            operating_hours=hours,
            categories=categories,
            availability=availability_status(restaurant, hours, as_of),
        )
