"""
FastAPI application factory.

Wires storage, middleware, routers and exception handlers.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import Settings, get_settings
from internal.infrastructure.memory import (
    InMemoryProductRepository,
    InMemoryProductStore,
    InMemoryUnitOfWork,
)
from internal.infrastructure.postgres import (
    PostgresProductRepository,
    PostgresUnitOfWork,
    check_database,
    create_pool,
)
from internal.transport.http.dependencies import set_dependencies
from internal.transport.http.errors import register_exception_handlers
from internal.transport.http.middleware import MetricsMiddleware, RequestIdMiddleware
from internal.transport.http.system import router as system_router
from internal.transport.http.v1.handlers import router
from pkg.logger.logger import get_logger

logger = get_logger(__name__)


def _use_memory_storage(settings: Settings) -> None:
    store = InMemoryProductStore()
    set_dependencies(
        unit_of_work_factory=lambda: InMemoryUnitOfWork(store),
        repository_factory=InMemoryProductRepository,
        health_check=store.ping,
        request_timeout=settings.request_timeout_seconds,
    )
    logger.warning("Using in-memory storage, data is not persisted")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Service settings; loaded from the environment if omitted.

    Returns:
        Configured application.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application lifespan manager.

        Handles startup and shutdown of resources.
        """
        logger.info("Starting Product Catalog API...", storage=settings.storage_backend)

        db_pool = None
        if settings.storage_backend == "memory":
            _use_memory_storage(settings)
        else:
            try:
                db_pool = await create_pool(
                    settings.database_url,
                    min_size=settings.db_pool_min_size,
                    max_size=settings.db_pool_max_size,
                )
                logger.info("Database pool created")
            except Exception as e:
                logger.error("Failed to create database pool", error=str(e))
                raise

            set_dependencies(
                unit_of_work_factory=lambda: PostgresUnitOfWork(db_pool),
                repository_factory=PostgresProductRepository,
                health_check=lambda: check_database(db_pool),
                request_timeout=settings.request_timeout_seconds,
            )

        logger.info("Product Catalog API started successfully")

        yield

        logger.info("Shutting down Product Catalog API...")

        if db_pool:
            await db_pool.close()

        logger.info("Product Catalog API shutdown complete")

    app = FastAPI(
        title="Product Catalog API",
        description="Product catalog create, update and lookup",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    app.include_router(system_router)
    app.include_router(router)

    return app
