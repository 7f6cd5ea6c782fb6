"""
FastAPI application for the movie catalog.

Public read-only listing endpoints plus token-protected admin
endpoints for managing the catalog.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.dependencies import get_config
from api.exceptions import (
    APIError,
    api_error_handler,
    generic_exception_handler,
    http_exception_handler,
    request_validation_handler,
)
from api.logging_config import (
    logger,
    generate_request_id,
    set_request_id,
)
from api.routers import admin, movies
from api.services.auth import AuthService
from api.services.catalog import CatalogService
from movie_catalog.config import Config
from movie_catalog.database import DatabaseManager
from movie_catalog.stores import AdminStore, MovieStore

# Skip request logging for health checks and docs
SKIP_LOG_PATHS = {"/health", "/", "/api/docs", "/api/redoc", "/api/openapi.json"}


def create_app(config: Optional[Config] = None) -> FastAPI:
    """
    Build the application.

    Args:
        config: Explicit configuration. When omitted, configuration is
                loaded from the environment at startup.

    Returns:
        FastAPI app whose stores and services are created on startup
        and disposed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app_config = config or get_config()
        db = DatabaseManager(app_config)

        if app_config.auto_create_tables:
            result = await db.check_and_create_tables()
            if result["created"]:
                logger.info(f"Created tables: {', '.join(result['created'])}")

        app.state.config = app_config
        app.state.db = db
        app.state.auth_service = AuthService(AdminStore(db), app_config)
        app.state.catalog_service = CatalogService(MovieStore(db), app_config)
        logger.info("Movie catalog API started")

        try:
            yield
        finally:
            await db.close()
            logger.info("Movie catalog API stopped")

    app = FastAPI(
        title="Movie Catalog API",
        description="Movie catalog with admin-managed listings",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # CORS must be configured before the app starts
    if config is None:
        load_dotenv()
        allowed_origins = Config.allowed_origins_from_env()
    else:
        allowed_origins = config.allowed_origins

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log all HTTP requests with timing and response status."""
        request_id = generate_request_id()
        set_request_id(request_id)

        if request.url.path in SKIP_LOG_PATHS:
            return await call_next(request)

        start_time = time.time()
        client_ip = request.client.host if request.client else "unknown"

        logger.info(
            f"Request started: {request.method} {request.url.path} "
            f"from {client_ip}"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.url.path} "
                f"duration={duration_ms:.2f}ms error={str(e)}"
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        log_msg = (
            f"Request completed: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration_ms:.2f}ms"
        )

        if response.status_code >= 500:
            logger.error(log_msg)
        elif response.status_code >= 400:
            logger.warning(log_msg)
        else:
            logger.info(log_msg)

        # Add request ID to response headers for debugging
        response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(admin.router, prefix="/api", tags=["Admin"])
    app.include_router(movies.router, prefix="/api", tags=["Movies"])

    @app.get("/", include_in_schema=False)
    async def root():
        """Service banner with a pointer to the docs."""
        return {
            "message": "Movie Catalog API",
            "docs": "/api/docs",
            "redoc": "/api/redoc",
        }

    @app.get("/health", include_in_schema=False)
    async def health():
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()
