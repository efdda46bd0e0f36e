"""
FastAPI Application Entry Point

Restaurant Ordering Platform - storefront API and availability evaluation.

Endpoints:
    - POST /api/restaurants: Create restaurant
    - GET  /api/restaurants/{slug}: Restaurant details
    - PUT  /api/restaurants/{id}/operating-hours: Replace weekly schedule
    - PATCH/DELETE /api/restaurants/{id}/categories|items/{id}: Menu maintenance
    - GET  /api/restaurants/{slug}/menu: Public menu with open/closed state
    - GET  /api/restaurants/{slug}/status: Open/closed state at an instant
    - GET  /order/{slug}: Server-rendered storefront page
    - GET  /health, /health/detailed: Health checks
"""

import json
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from redis.asyncio import Redis
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings, setup_logging
from app.core.errors import AppError, NotFoundError, ValidationError
from app.database import Database, get_db
from app.schemas import (
    AvailabilityResponse,
    DayHoursResponse,
    DetailedHealthResponse,
    ErrorResponse,
    GenerateSlugRequest,
    GenerateSlugResponse,
    HealthResponse,
    ItemAvailabilityUpdate,
    MenuCategoryCreate,
    MenuCategoryResponse,
    MenuCategoryUpdate,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
    NextOpeningResponse,
    OperatingHoursResponse,
    PublicMenuCategory,
    PublicMenuResponse,
    RestaurantCreate,
    RestaurantResponse,
    RestaurantUpdate,
    SlugAvailabilityResponse,
    WeeklyScheduleUpdate,
)
from app.services.hours import AvailabilityStatus, availability_status
from app.services.menu import MenuService, PublicMenu
from app.services.restaurant import RestaurantService
from app.services.seo import build_restaurant_schema

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)

# Template configuration
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

router = APIRouter()


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_restaurant_service(db: AsyncSession = Depends(get_db)) -> RestaurantService:
    return RestaurantService(db)


def get_menu_service(db: AsyncSession = Depends(get_db)) -> MenuService:
    return MenuService(db)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def availability_response(status: AvailabilityStatus) -> AvailabilityResponse:
    """Convert an evaluator result to its wire schema."""
    next_opening = None
    if status.next_opening is not None:
        next_opening = NextOpeningResponse(**status.next_opening.to_dict())

    return AvailabilityResponse(
        is_open=status.is_open,
        next_opening=next_opening,
        timezone=status.timezone,
        local_time=status.local_time,
        current_day_of_week=status.current_day_of_week,
        weekly_hours=[
            DayHoursResponse(
                day_of_week=row.day_of_week,
                day_name=row.day_name,
                hours=row.hours,
                is_today=row.is_today,
            )
            for row in status.weekly_hours
        ],
    )


def public_menu_response(menu: PublicMenu) -> PublicMenuResponse:
    return PublicMenuResponse(
        restaurant=RestaurantResponse.model_validate(menu.restaurant),
        operating_hours=[OperatingHoursResponse.model_validate(h) for h in menu.operating_hours],
        categories=[
            PublicMenuCategory(
                **{key: value for key, value in category.items() if key != "items"},
                items=[MenuItemResponse.model_validate(item) for item in category["items"]],
            )
            for category in menu.categories
        ],
        availability=availability_response(menu.availability),
    )


def storefront_structured_data(menu: PublicMenu) -> str:
    """JSON-LD for the storefront page, safe to embed in a script tag."""
    schema = build_restaurant_schema(
        menu.restaurant,
        menu.operating_hours,
        menu.categories,
        base_url=settings.public_base_url,
    )
    return json.dumps(schema).replace("</", "<\\/")


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@router.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Liveness Check",
)
async def health_check(request: Request) -> HealthResponse:
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(),
        uptime=round(time.monotonic() - request.app.state.started_at, 3),
    )


@router.get(
    "/health/detailed",
    response_model=DetailedHealthResponse,
    responses={503: {"model": DetailedHealthResponse}},
    tags=["Health"],
    summary="Dependency Health Check",
)
async def detailed_health_check(request: Request) -> JSONResponse:
    """Probe the database and redis; 503 when either is unreachable."""
    status = "ok"

    database_status = "connected"
    try:
        await request.app.state.db.ping()
    except Exception as e:
        database_status = "disconnected"
        status = "degraded"
        logger.error(f"Database health check failed: {e}")

    redis_status = "connected"
    try:
        await request.app.state.redis.ping()
    except Exception as e:
        redis_status = "disconnected"
        status = "degraded"
        logger.error(f"Redis health check failed: {e}")

    body = DetailedHealthResponse(
        status=status,
        timestamp=datetime.now(),
        uptime=round(time.monotonic() - request.app.state.started_at, 3),
        database=database_status,
        redis=redis_status,
    )
    return JSONResponse(
        status_code=200 if status == "ok" else 503,
        content=body.model_dump(mode="json"),
    )


# =============================================================================
# RESTAURANT ENDPOINTS
# =============================================================================

@router.post(
    "/api/restaurants",
    response_model=RestaurantResponse,
    status_code=201,
    responses={409: {"model": ErrorResponse}},
    tags=["Restaurants"],
)
async def create_restaurant(
    data: RestaurantCreate,
    service: RestaurantService = Depends(get_restaurant_service),
) -> RestaurantResponse:
    restaurant = await service.create_restaurant(data)
    return RestaurantResponse.model_validate(restaurant)


@router.post(
    "/api/restaurants/generate-slug",
    response_model=GenerateSlugResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Restaurants"],
)
async def generate_slug(data: GenerateSlugRequest) -> GenerateSlugResponse:
    slug = RestaurantService.generate_slug(data.name)
    if not slug:
        raise ValidationError("Name must contain at least one letter or digit")
    return GenerateSlugResponse(name=data.name, slug=slug)


@router.get(
    "/api/restaurants/check-slug/{slug}",
    response_model=SlugAvailabilityResponse,
    tags=["Restaurants"],
)
async def check_slug(
    slug: str,
    service: RestaurantService = Depends(get_restaurant_service),
) -> SlugAvailabilityResponse:
    return SlugAvailabilityResponse(slug=slug, available=await service.is_slug_available(slug))


@router.get(
    "/api/restaurants/{slug}",
    response_model=RestaurantResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Restaurants"],
)
async def get_restaurant(
    slug: str,
    service: RestaurantService = Depends(get_restaurant_service),
) -> RestaurantResponse:
    restaurant = await service.get_restaurant_by_slug(slug)
    return RestaurantResponse.model_validate(restaurant)


@router.patch(
    "/api/restaurants/{restaurant_id}",
    response_model=RestaurantResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Restaurants"],
)
async def update_restaurant(
    restaurant_id: str,
    data: RestaurantUpdate,
    service: RestaurantService = Depends(get_restaurant_service),
) -> RestaurantResponse:
    restaurant = await service.update_restaurant(restaurant_id, data)
    return RestaurantResponse.model_validate(restaurant)


# =============================================================================
# OPERATING HOURS ENDPOINTS
# =============================================================================

@router.get(
    "/api/restaurants/{restaurant_id}/operating-hours",
    response_model=list[OperatingHoursResponse],
    tags=["Operating Hours"],
)
async def get_operating_hours(
    restaurant_id: str,
    service: RestaurantService = Depends(get_restaurant_service),
) -> list[OperatingHoursResponse]:
    hours = await service.get_operating_hours(restaurant_id)
    return [OperatingHoursResponse.model_validate(h) for h in hours]


@router.put(
    "/api/restaurants/{restaurant_id}/operating-hours",
    response_model=list[OperatingHoursResponse],
    tags=["Operating Hours"],
    summary="Replace Weekly Schedule",
)
async def replace_operating_hours(
    restaurant_id: str,
    schedule: WeeklyScheduleUpdate,
    service: RestaurantService = Depends(get_restaurant_service),
) -> list[OperatingHoursResponse]:
    """Replace all seven days at once; partial schedules are rejected."""
    hours = await service.replace_operating_hours(restaurant_id, schedule.root)
    return [OperatingHoursResponse.model_validate(h) for h in hours]


# =============================================================================
# MENU ENDPOINTS
# =============================================================================

@router.post(
    "/api/restaurants/{restaurant_id}/categories",
    response_model=MenuCategoryResponse,
    status_code=201,
    tags=["Menu"],
)
async def create_category(
    restaurant_id: str,
    data: MenuCategoryCreate,
    service: MenuService = Depends(get_menu_service),
) -> MenuCategoryResponse:
    category = await service.create_category(restaurant_id, data)
    return MenuCategoryResponse.model_validate(category)


@router.get(
    "/api/restaurants/{restaurant_id}/categories",
    response_model=list[MenuCategoryResponse],
    tags=["Menu"],
)
async def list_categories(
    restaurant_id: str,
    service: MenuService = Depends(get_menu_service),
) -> list[MenuCategoryResponse]:
    categories = await service.list_categories(restaurant_id)
    return [MenuCategoryResponse.model_validate(c) for c in categories]


@router.patch(
    "/api/restaurants/{restaurant_id}/categories/{category_id}",
    response_model=MenuCategoryResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Menu"],
)
async def update_category(
    restaurant_id: str,
    category_id: str,
    data: MenuCategoryUpdate,
    service: MenuService = Depends(get_menu_service),
) -> MenuCategoryResponse:
    category = await service.update_category(category_id, restaurant_id, data)
    return MenuCategoryResponse.model_validate(category)


@router.delete(
    "/api/restaurants/{restaurant_id}/categories/{category_id}",
    status_code=204,
    responses={404: {"model": ErrorResponse}},
    tags=["Menu"],
)
async def delete_category(
    restaurant_id: str,
    category_id: str,
    service: MenuService = Depends(get_menu_service),
) -> Response:
    """Delete a category and every item in it."""
    await service.delete_category(category_id, restaurant_id)
    return Response(status_code=204)


@router.post(
    "/api/restaurants/{restaurant_id}/items",
    response_model=MenuItemResponse,
    status_code=201,
    tags=["Menu"],
)
async def create_item(
    restaurant_id: str,
    data: MenuItemCreate,
    service: MenuService = Depends(get_menu_service),
) -> MenuItemResponse:
    item = await service.create_item(restaurant_id, data)
    return MenuItemResponse.model_validate(item)


@router.patch(
    "/api/restaurants/{restaurant_id}/items/{item_id}",
    response_model=MenuItemResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Menu"],
)
async def update_item(
    restaurant_id: str,
    item_id: str,
    data: MenuItemUpdate,
    service: MenuService = Depends(get_menu_service),
) -> MenuItemResponse:
    item = await service.update_item(item_id, restaurant_id, data)
    return MenuItemResponse.model_validate(item)


@router.delete(
    "/api/restaurants/{restaurant_id}/items/{item_id}",
    status_code=204,
    responses={404: {"model": ErrorResponse}},
    tags=["Menu"],
)
async def delete_item(
    restaurant_id: str,
    item_id: str,
    service: MenuService = Depends(get_menu_service),
) -> Response:
    """Soft delete; the item disappears from the public menu."""
    await service.delete_item(item_id, restaurant_id)
    return Response(status_code=204)


@router.patch(
    "/api/restaurants/{restaurant_id}/items/{item_id}/availability",
    response_model=MenuItemResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Menu"],
    summary="Mark Item Sold Out / Back In Stock",
)
async def set_item_availability(
    restaurant_id: str,
    item_id: str,
    data: ItemAvailabilityUpdate,
    service: MenuService = Depends(get_menu_service),
) -> MenuItemResponse:
    item = await service.set_item_availability(item_id, restaurant_id, data.is_available)
    return MenuItemResponse.model_validate(item)


@router.get(
    "/api/restaurants/{slug}/menu",
    response_model=PublicMenuResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Storefront"],
    summary="Public Menu",
)
async def get_public_menu(
    slug: str,
    response: Response,
    service: MenuService = Depends(get_menu_service),
) -> PublicMenuResponse:
    """Active categories and items, hours, and current open/closed state."""
    menu = await service.get_public_menu(slug)
    response.headers["Cache-Control"] = f"public, max-age={settings.menu_cache_seconds}"
    return public_menu_response(menu)


@router.get(
    "/api/restaurants/{slug}/status",
    response_model=AvailabilityResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Storefront"],
    summary="Open/Closed Status",
)
async def get_status(
    slug: str,
    at: Optional[datetime] = Query(None, description="Instant to evaluate (ISO 8601); defaults to now"),
    service: RestaurantService = Depends(get_restaurant_service),
) -> AvailabilityResponse:
    restaurant = await service.get_active_restaurant_by_slug(slug)
    hours = await service.get_operating_hours(restaurant.id)
    return availability_response(availability_status(restaurant, hours, at))


# =============================================================================
# STOREFRONT PAGES
# =============================================================================

@router.get(
    "/order/{slug}",
    response_class=HTMLResponse,
    tags=["Storefront"],
)
async def storefront_page(
    request: Request,
    slug: str,
    service: MenuService = Depends(get_menu_service),
) -> HTMLResponse:
    """Server-rendered ordering page; checkout is disabled while closed."""
    try:
        menu = await service.get_public_menu(slug)
    except NotFoundError:
        return templates.TemplateResponse(
            request, "not_found.html", {"slug": slug}, status_code=404
        )

    return templates.TemplateResponse(
        request,
        "storefront.html",
        {
            "restaurant": menu.restaurant,
            "categories": menu.categories,
            "availability": menu.availability,
            "structured_data": storefront_structured_data(menu),
        },
    )


# =============================================================================
# ERROR HANDLERS
# =============================================================================

async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"Integrity error on {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=409,
        content={
            "success": False,
            "error": "ConflictError",
            "message": "A record with this value already exists",
            "code": "CONFLICT_ERROR",
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "InternalServerError",
            "message": str(exc) if settings.debug else "An unexpected error occurred",
            "code": None,
        },
    )


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app(
    database: Optional[Database] = None,
    redis_client: Optional[Any] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        database: Database handle to use instead of one built from settings
        redis_client: Redis handle to use instead of one built from settings
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Create service handles at startup and dispose them on shutdown.
        """
        logger.info("=" * 60)
        logger.info(f"Starting {settings.app_name}")
        logger.info(f"   Version: {settings.app_version}")
        logger.info(f"   Environment: {settings.env_mode.value}")
        logger.info(f"   Debug: {settings.debug}")
        logger.info("=" * 60)

        app.state.started_at = time.monotonic()
        app.state.db = database or Database(settings.database_url, echo=settings.database_echo)
        app.state.redis = redis_client or Redis.from_url(settings.redis_url, socket_timeout=2)

        await app.state.db.create_all()
        logger.info("Application ready")

        yield  # Application runs

        logger.info("Shutting down...")
        await app.state.redis.aclose()
        await app.state.db.dispose()
        logger.info("Cleanup complete")

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Multi-tenant restaurant ordering platform: restaurants, menus, "
            "operating hours and storefront availability."
        ),
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
