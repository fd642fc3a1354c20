"""FastAPI application factory for Storefront-Engine."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront_engine.common.config import get_settings
from storefront_engine.common.logging import get_logger, setup_logging
from storefront_engine.common.schemas import HealthResponse


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)
    logger = get_logger("app")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        from storefront_engine.deps import get_db
        db = get_db()
        await db.init()
        await db.create_all()
        logger.info("Storefront-Engine started (identity backend: %s)", settings.identity_backend)
        yield
        # Shutdown
        await db.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(version=settings.api_version)

    # Mount routers
    from storefront_engine.identity.router import router as auth_router
    from storefront_engine.categories.router import router as category_router
    from storefront_engine.tenants.router import router as tenant_router
    from storefront_engine.catalog.router import router as product_router
    from storefront_engine.storefront.router import router as storefront_router
    from storefront_engine.admin.router import router as admin_router

    prefix = settings.api_prefix
    app.include_router(auth_router, prefix=prefix)
    app.include_router(category_router, prefix=prefix)
    app.include_router(tenant_router, prefix=prefix)
    app.include_router(product_router, prefix=prefix)
    app.include_router(storefront_router, prefix=prefix)
    app.include_router(admin_router, prefix=prefix)

    return app
