"""
                        Services Module

Business logic behind the HTTP layer:
    - hours: availability evaluator (open/closed, next opening, display)
    - restaurant: restaurant CRUD and weekly schedules
    - menu: categories, items and the public menu payload
    - seo: Schema.org structured data
"""

from app.services.menu import MenuService
from app.services.restaurant import RestaurantService

__all__ = ["MenuService", "RestaurantService"]
