"""
Demo Seeding Script

Creates a demo restaurant with a weekly schedule (including an overnight
Friday/Saturday shift) and a small menu, then prints its open/closed status.
Run from project root against a running API: python scripts/seed_demo.py

Usage:
    python scripts/seed_demo.py --slug pizza-palace --timezone America/Chicago
"""

import argparse
import asyncio
import sys
from typing import Any

import httpx

# Configuration
API_BASE_URL = "http://localhost:8001"

WEEKLY_HOURS = [
    {"dayOfWeek": 0, "openTime": "12:00", "closeTime": "21:00", "isClosed": False},
    {"dayOfWeek": 1, "openTime": "09:00", "closeTime": "22:00", "isClosed": True},
    {"dayOfWeek": 2, "openTime": "11:00", "closeTime": "22:00", "isClosed": False},
    {"dayOfWeek": 3, "openTime": "11:00", "closeTime": "22:00", "isClosed": False},
    {"dayOfWeek": 4, "openTime": "11:00", "closeTime": "22:00", "isClosed": False},
    {"dayOfWeek": 5, "openTime": "17:00", "closeTime": "02:00", "isClosed": False},
    {"dayOfWeek": 6, "openTime": "17:00", "closeTime": "02:00", "isClosed": False},
]

MENU = {
    "Pizza": [
        {"name": "Pizza Margherita", "price": 1499, "tags": ["vegetarian"], "calories": 850},
        {"name": "Pepperoni Pizza", "price": 1699, "tags": []},
    ],
    "Salads": [
        {"name": "Caesar Salad", "price": 899, "tags": []},
        {"name": "Garden Salad", "price": 799, "tags": ["vegan", "vegetarian"], "calories": 220},
    ],
    "Drinks": [
        {"name": "Sparkling Water", "price": 349, "tags": ["vegan"]},
    ],
}


def check(response: httpx.Response, expected: int = 200) -> dict[str, Any]:
    """Exit with the server's message when a call fails."""
    if response.status_code != expected:
        print(f"❌ {response.request.method} {response.request.url} -> {response.status_code}")
        print(f"   {response.text[:300]}")
        sys.exit(1)
    return response.json()


async def seed(slug: str, timezone: str) -> None:
    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=10) as client:
        print("=" * 60)
        print(f"🌱 Seeding demo restaurant '{slug}'")
        print("=" * 60)

        available = check(await client.get(f"/api/restaurants/check-slug/{slug}"))
        if available["available"]:
            restaurant = check(
                await client.post("/api/restaurants", json={
                    "name": slug.replace("-", " ").title(),
                    "slug": slug,
                    "timezone": timezone,
                    "city": "Chicago",
                    "state": "IL",
                }),
                expected=201,
            )
            print(f"✅ Restaurant created: {restaurant['id']}")
        else:
            restaurant = check(await client.get(f"/api/restaurants/{slug}"))
            print(f"ℹ️ Restaurant exists: {restaurant['id']}")

        restaurant_id = restaurant["id"]

        hours = check(await client.put(
            f"/api/restaurants/{restaurant_id}/operating-hours", json=WEEKLY_HOURS
        ))
        print(f"✅ Operating hours set ({len(hours)} days)")

        for position, (category_name, items) in enumerate(MENU.items()):
            category = check(
                await client.post(
                    f"/api/restaurants/{restaurant_id}/categories",
                    json={"name": category_name, "sortOrder": position},
                ),
                expected=201,
            )
            for item_position, item in enumerate(items):
                check(
                    await client.post(
                        f"/api/restaurants/{restaurant_id}/items",
                        json={**item, "categoryId": category["id"], "sortOrder": item_position},
                    ),
                    expected=201,
                )
            print(f"✅ Category '{category_name}' with {len(items)} items")

        status = check(await client.get(f"/api/restaurants/{slug}/status"))
        print("\n🕒 STATUS:")
        print(f"   Local time: {status['localTime']} ({status['timezone']})")
        print(f"   Open now: {status['isOpen']}")
        if status.get("nextOpening"):
            opening = status["nextOpening"]
            print(f"   Opens {opening['day']} at {opening['time']}")

        print("\n📋 HOURS:")
        for row in status["weeklyHours"]:
            marker = "→" if row["isToday"] else " "
            print(f"  {marker} {row['dayName']:<10} {row['hours']}")

        print("\n" + "=" * 60)
        print(f"🌐 Storefront: {API_BASE_URL}/order/{slug}")
        print("=" * 60)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed a demo restaurant")
    parser.add_argument("--slug", default="pizza-palace", help="Restaurant slug")
    parser.add_argument("--timezone", default="America/Chicago", help="IANA timezone")
    parser.add_argument("--api", default=API_BASE_URL, help="API base URL")
    args = parser.parse_args()

    API_BASE_URL = args.api.rstrip("/")
    asyncio.run(seed(args.slug, args.timezone))
