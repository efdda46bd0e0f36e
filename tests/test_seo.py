"""Schema.org structured data."""

from types import SimpleNamespace

from app.services.seo import build_restaurant_schema, opening_hours_specification
from tests.helpers import make_rule


def make_restaurant(**overrides):
    fields = dict(
        name="Pizza Palace",
        slug="pizza-palace",
        description="Wood-fired pizza",
        logo_url=None,
        cover_image_url="https://cdn.example.com/cover.jpg",
        phone="555-123-4567",
        email="hello@pizzapalace.com",
        address_line1="350 Fifth Avenue",
        address_line2="Suite 2",
        city="New York",
        state="NY",
        postal_code="10118",
        country="US",
        currency="USD",
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_opening_hours_specification_skips_closed_days():
    schedule = [
        make_rule(2, "11:00", "22:00"),
        make_rule(1, is_closed=True),
        make_rule(5, "22:00", "02:00"),
    ]

    assert opening_hours_specification(schedule) == [
        {"@type": "OpeningHoursSpecification", "dayOfWeek": "Tuesday", "opens": "11:00", "closes": "22:00"},
        {"@type": "OpeningHoursSpecification", "dayOfWeek": "Friday", "opens": "22:00", "closes": "02:00"},
    ]


def test_build_restaurant_schema():
    categories = [
        {
            "name": "Pizza",
            "description": "From the oven",
            "items": [
                SimpleNamespace(
                    name="Margherita", description=None, price=1499, image_url=None,
                    tags=["vegetarian"], calories=850,
                ),
                SimpleNamespace(
                    name="Pepperoni", description=None, price=1700, image_url=None,
                    tags=[], calories=None,
                ),
            ],
        },
        {"name": "Salads", "description": None, "items": []},
    ]

    schema = build_restaurant_schema(
        make_restaurant(),
        [make_rule(0, "12:00", "21:00")],
        categories,
        base_url="https://order.example.com",
    )

    assert schema["@type"] == "Restaurant"
    assert schema["url"] == "https://order.example.com/order/pizza-palace"
    assert schema["image"] == "https://cdn.example.com/cover.jpg"
    assert schema["address"]["streetAddress"] == "350 Fifth Avenue, Suite 2"
    assert schema["servesCuisine"] == ["Pizza", "Salads"]
    assert schema["openingHoursSpecification"][0]["dayOfWeek"] == "Sunday"

    sections = schema["hasMenu"]["hasMenuSection"]
    margherita, pepperoni = sections[0]["hasMenuItem"]
    assert margherita["offers"] == {"@type": "Offer", "price": "14.99", "priceCurrency": "USD"}
    assert margherita["suitableForDiet"] == ["https://schema.org/VegetarianDiet"]
    assert margherita["nutrition"]["calories"] == "850 calories"
    assert pepperoni["offers"]["price"] == "17.00"
    assert "nutrition" not in pepperoni
    assert sections[1]["hasMenuItem"] == []
