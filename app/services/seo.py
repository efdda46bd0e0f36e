"""
Schema.org Structured Data

Builds the ``Restaurant`` JSON-LD document embedded in the storefront page so
search engines can read the address, opening hours and menu.
"""

from typing import Any, Iterable

from app.services.hours import get_day_name

DIET_TAGS = {
    "vegetarian": "https://schema.org/VegetarianDiet",
    "vegan": "https://schema.org/VeganDiet",
}


def _get(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def opening_hours_specification(schedule: Iterable[Any]) -> list[dict]:
    """One entry per open day; times are published verbatim."""
    return [
        {
            "@type": "OpeningHoursSpecification",
            "dayOfWeek": get_day_name(rule.day_of_week),
            "opens": rule.open_time,
            "closes": rule.close_time,
        }
        for rule in sorted(schedule, key=lambda r: r.day_of_week)
        if not rule.is_closed
    ]


def _menu_item(item: Any, currency: str) -> dict:
    entry = {
        "@type": "MenuItem",
        "name": _get(item, "name"),
        "description": _get(item, "description"),
        "offers": {
            "@type": "Offer",
            "price": f"{_get(item, 'price', 0) / 100:.2f}",
            "priceCurrency": currency,
        },
        "image": _get(item, "image_url"),
        "suitableForDiet": [
            url for tag, url in DIET_TAGS.items() if tag in (_get(item, "tags") or [])
        ],
    }
    calories = _get(item, "calories")
    if calories:
        entry["nutrition"] = {
            "@type": "NutritionInformation",
            "calories": f"{calories} calories",
        }
    return entry


def build_restaurant_schema(
    restaurant: Any,
    schedule: Iterable[Any],
    categories: Iterable[Any],
    base_url: str,
) -> dict:
    """
    Build the Schema.org ``Restaurant`` document.

    Args:
        restaurant: Restaurant row or schema
        schedule: Operating-hours rules
        categories: Menu categories (objects or dicts) with ``items``
        base_url: Public storefront origin, without trailing slash
    """
    categories = list(categories)
    street = ", ".join(
        part for part in (restaurant.address_line1, restaurant.address_line2) if part
    )

    return {
        "@context": "https://schema.org",
        "@type": "Restaurant",
        "name": restaurant.name,
        "description": restaurant.description,
        "image": restaurant.logo_url or restaurant.cover_image_url,
        "logo": restaurant.logo_url,
        "url": f"{base_url}/order/{restaurant.slug}",
        "telephone": restaurant.phone,
        "email": restaurant.email,
        "address": {
            "@type": "PostalAddress",
            "streetAddress": street,
            "addressLocality": restaurant.city,
            "addressRegion": restaurant.state,
            "postalCode": restaurant.postal_code,
            "addressCountry": restaurant.country,
        },
        "openingHoursSpecification": opening_hours_specification(schedule),
        "servesCuisine": [_get(category, "name") for category in categories],
        "hasMenu": {
            "@type": "Menu",
            "hasMenuSection": [
                {
                    "@type": "MenuSection",
                    "name": _get(category, "name"),
                    "description": _get(category, "description"),
                    "hasMenuItem": [
                        _menu_item(item, restaurant.currency)
                        for item in _get(category, "items", [])
                    ],
                }
                for category in categories
            ],
        },
        "acceptsReservations": False,
        "priceRange": "$$",
    }
