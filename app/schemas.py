"""
Pydantic Schemas for Request/Response Validation

Wire format is camelCase (``dayOfWeek``, ``acceptingOrders``); snake_case
field names are accepted on input as well.
"""

import re
from datetime import datetime
from typing import ClassVar, FrozenSet, List, Optional

import pytz
from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator, model_validator
from pydantic.alias_generators import to_camel

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
SLUG_PATTERN = r"^[a-z0-9-]+$"


class CamelModel(BaseModel):
    """Base schema with camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PartialUpdate(CamelModel):
    """
    Base for PATCH bodies.

    Omitted fields are left untouched and an explicit null clears a nullable
    column. Null is rejected for the fields named in ``non_nullable``.
    """
    non_nullable: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_for_required(self):
        nulls = sorted(
            name for name in self.model_fields_set & self.non_nullable
            if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self

    def changes(self) -> dict:
        """Fields present in the request, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


def _validate_timezone(v: Optional[str]) -> Optional[str]:
    if v is not None and v not in pytz.all_timezones_set:
        raise ValueError(f"Unknown timezone: {v}")
    return v


def _validate_email(v: Optional[str]) -> Optional[str]:
    if v is None or v == "":
        return None
    if not re.match(r'^[\w\.+-]+@[\w\.-]+\.\w+$', v):
        raise ValueError('Invalid email format')
    return v


# =============================================================================
# OPERATING HOURS
# =============================================================================

class OperatingHoursRule(CamelModel):
    """One day of the weekly schedule."""
    day_of_week: int = Field(..., ge=0, le=6, examples=[1])
    open_time: str = Field(..., pattern=TIME_PATTERN, examples=["09:00"])
    close_time: str = Field(..., pattern=TIME_PATTERN, examples=["22:00"])
    is_closed: bool = False


class OperatingHoursResponse(OperatingHoursRule):
    id: str
    restaurant_id: str


class WeeklyScheduleUpdate(RootModel[List[OperatingHoursRule]]):
    """Replacement schedule: exactly one rule for each of the 7 days."""

    @model_validator(mode="after")
    def check_full_week(self) -> "WeeklyScheduleUpdate":
        days = [rule.day_of_week for rule in self.root]
        if len(days) != 7:
            raise ValueError("Operating hours must contain exactly 7 days")
        if len(set(days)) != 7:
            raise ValueError("Operating hours must contain each day of the week once")
        return self


# =============================================================================
# RESTAURANT
# =============================================================================

class RestaurantCreate(CamelModel):
    """Request schema for creating a restaurant."""
    name: str = Field(..., min_length=1, max_length=255, examples=["Pizza Palace"])
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN, examples=["pizza-palace"])
    description: Optional[str] = Field(None, max_length=1000)
    email: Optional[str] = Field(None, examples=["hello@pizzapalace.com"])
    phone: Optional[str] = Field(None, max_length=20)
    timezone: Optional[str] = Field(None, examples=["America/New_York"])
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    locale: Optional[str] = None
    address_line1: Optional[str] = Field(None, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, min_length=2, max_length=2)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        return _validate_timezone(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        return _validate_email(v)


class RestaurantUpdate(PartialUpdate):
    """Partial update; only fields present in the request are changed."""
    non_nullable: ClassVar[FrozenSet[str]] = frozenset({
        "name", "timezone", "currency", "locale", "country",
        "is_active", "accepting_orders", "pickup_enabled", "delivery_enabled",
        "dine_in_enabled", "prep_time_minutes", "brand_color",
    })

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    email: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)
    timezone: Optional[str] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    locale: Optional[str] = None
    address_line1: Optional[str] = Field(None, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, min_length=2, max_length=2)
    logo_url: Optional[str] = Field(None, max_length=500)
    cover_image_url: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None
    accepting_orders: Optional[bool] = None
    pickup_enabled: Optional[bool] = None
    delivery_enabled: Optional[bool] = None
    dine_in_enabled: Optional[bool] = None
    prep_time_minutes: Optional[int] = Field(None, ge=0, le=300)
    brand_color: Optional[str] = Field(None, pattern=r"^#[0-9a-fA-F]{6}$")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        return _validate_timezone(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        return _validate_email(v)


class RestaurantResponse(CamelModel):
    """Response schema for a single restaurant."""
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    timezone: str
    currency: str
    locale: str
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: str
    is_active: bool
    accepting_orders: bool
    pickup_enabled: bool
    delivery_enabled: bool
    dine_in_enabled: bool
    prep_time_minutes: int
    brand_color: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GenerateSlugRequest(CamelModel):
    name: str = Field(..., min_length=1)


class GenerateSlugResponse(CamelModel):
    name: str
    slug: str


class SlugAvailabilityResponse(CamelModel):
    slug: str
    available: bool


# =============================================================================
# MENU
# =============================================================================

class MenuCategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Pizza"])
    description: Optional[str] = Field(None, max_length=1000)
    image_url: Optional[str] = Field(None, max_length=500)
    sort_order: int = Field(default=0, ge=0)
    is_active: bool = True


class MenuItemCreate(CamelModel):
    category_id: str
    name: str = Field(..., min_length=1, max_length=255, examples=["Pizza Margherita"])
    description: Optional[str] = Field(None, max_length=1000)
    price: int = Field(..., ge=0, description="Price in cents", examples=[1499])
    image_url: Optional[str] = Field(None, max_length=500)
    tags: List[str] = Field(default_factory=list, examples=[["vegetarian"]])
    calories: Optional[int] = Field(None, ge=0)
    is_available: bool = True
    sort_order: int = Field(default=0, ge=0)


class MenuCategoryUpdate(PartialUpdate):
    non_nullable: ClassVar[FrozenSet[str]] = frozenset({"name", "sort_order", "is_active"})

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    image_url: Optional[str] = Field(None, max_length=500)
    sort_order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class MenuItemUpdate(PartialUpdate):
    """Partial item update; a new ``category_id`` moves the item."""
    non_nullable: ClassVar[FrozenSet[str]] = frozenset({
        "category_id", "name", "price", "tags", "is_active", "is_available", "sort_order",
    })

    category_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    price: Optional[int] = Field(None, ge=0, description="Price in cents")
    image_url: Optional[str] = Field(None, max_length=500)
    tags: Optional[List[str]] = None
    calories: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    is_available: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)


class ItemAvailabilityUpdate(CamelModel):
    """Mark an item sold out or back in stock."""
    is_available: bool


class MenuItemResponse(CamelModel):
    id: str
    category_id: str
    name: str
    description: Optional[str] = None
    price: int
    image_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    calories: Optional[int] = None
    is_active: bool
    is_available: bool
    sort_order: int


class MenuCategoryResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    sort_order: int
    is_active: bool


class PublicMenuCategory(MenuCategoryResponse):
    items: List[MenuItemResponse] = Field(default_factory=list)


# =============================================================================
# AVAILABILITY
# =============================================================================

class NextOpeningResponse(CamelModel):
    day: str
    time: str


class DayHoursResponse(CamelModel):
    day_of_week: int
    day_name: str
    hours: str
    is_today: bool


class AvailabilityResponse(CamelModel):
    is_open: bool
    next_opening: Optional[NextOpeningResponse] = None
    timezone: str
    local_time: str
    current_day_of_week: int
    weekly_hours: List[DayHoursResponse]


class PublicMenuResponse(CamelModel):
    """Everything the storefront needs to render a restaurant page."""
    restaurant: RestaurantResponse
    operating_hours: List[OperatingHoursResponse]
    categories: List[PublicMenuCategory]
    availability: AvailabilityResponse


# =============================================================================
# SYSTEM
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    message: str
    code: Optional[str] = None


class HealthResponse(BaseModel):
    """Liveness response."""
    status: str
    timestamp: datetime
    uptime: float


class DetailedHealthResponse(HealthResponse):
    """Health with dependency probes."""
    database: str
    redis: str
