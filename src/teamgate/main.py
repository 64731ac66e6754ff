from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.teamgate.api.middlewares import setup_middlewares
from src.teamgate.api.v1.router import api_router
from src.teamgate.core.config import get_settings
from src.teamgate.core.db import dispose_engine
from src.teamgate.core.exceptions import setup_exception_handlers
from src.teamgate.core.health import setup_health_endpoint, setup_metrics
from src.teamgate.core.logging import get_logger, setup_logging
from src.teamgate.core.redis import close_redis
from src.teamgate.core.seed import seed_catalog

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("Starting application", app_name=settings.app_name, env=settings.app_env)

    if settings.seed_catalog_on_startup:
        await seed_catalog()

    yield

    logger.info("Closing connections...")
    await close_redis()
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "me", "description": "Resolved identity and team context"},
    {"name": "onboarding", "description": "Create a tenant or request to join one"},
    {"name": "tenants", "description": "Tenant discovery and settings"},
    {"name": "memberships", "description": "Membership requests and decisions"},
    {"name": "roles", "description": "Tenant roles and their permissions"},
    {"name": "members", "description": "Tenant members and role assignment"},
    {"name": "permissions", "description": "Permission catalog and checks"},
    {"name": "audit", "description": "Audit trail of the current tenant"},
    {"name": "admin", "description": "Master admin endpoints"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Team membership and authorization API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)
    setup_middlewares(app, settings)
    app.include_router(api_router)
    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
