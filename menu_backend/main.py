from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware
from starlette.staticfiles import StaticFiles

# Load environment variables as early as possible
load_dotenv()

from .core.config import Settings, get_settings
from .db.session import build_engine, create_db_and_tables
from .exceptions import http_exception_handler, integrity_error_handler, validation_exception_handler
from .infrastructure.rate_limit import build_rate_limiter
from .middleware import (
    ErrorHandlingMiddleware,
    ImageResizeMiddleware,
    LoggingMiddleware,
    RateLimitMiddleware,
    RequestSizeLimitMiddleware,
    SecurityMiddleware,
)
from .routers import (
    auth_router,
    banner_router,
    category_router,
    frontpad_router,
    product_router,
    settings_router,
    type_router,
)
from .services.images.cache import DerivedImageCache
from .services.images.policy import ResizeSpec, normalize_format
from .services.orders.frontpad_service import FrontpadService
from .services.storage.storage_service import StorageService

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=settings.LOG_FORMAT,
    )

    engine = build_engine(settings)
    image_cache = DerivedImageCache(settings.STATIC_DIR, enabled=settings.IMAGE_CACHE_ENABLED)
    storage = StorageService(
        settings.STATIC_DIR,
        image_cache,
        min_product_size=settings.PRODUCT_IMAGE_MIN_SIZE,
        max_product_size=settings.PRODUCT_IMAGE_MAX_SIZE,
    )
    default_spec = ResizeSpec(
        target_width=settings.IMAGE_DEFAULT_WIDTH,
        target_height=settings.IMAGE_DEFAULT_HEIGHT,
        quality=settings.IMAGE_DEFAULT_QUALITY,
        format=normalize_format(settings.IMAGE_DEFAULT_FORMAT),
    )
    if not settings.IMAGE_CACHE_ENABLED:
        logger.warning("Image cache disabled: every resize request is transcoded")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info(f"Starting {settings.APP_NAME}...")
        app.state.db_init_ok = True
        try:
            create_db_and_tables(engine)
            logger.info("Database initialized successfully")
        except Exception:
            # Do not crash the app; report via health endpoint
            app.state.db_init_ok = False
            logger.exception("Database initialization failed")
        yield
        # Shutdown
        engine.dispose()
        logger.info(f"Shutting down {settings.APP_NAME}...")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url=("/docs" if settings.DOCS_ENABLED else None),
        redoc_url=("/redoc" if settings.DOCS_ENABLED else None),
        openapi_url=("/openapi.json" if settings.DOCS_ENABLED else None),
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.image_cache = image_cache
    app.state.storage = storage
    app.state.frontpad = FrontpadService(settings)

    # Exception handlers render the {message, status, timestamp} envelope
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)

    # Middleware, innermost first. Resized images bypass gzip.
    window = settings.RATE_LIMIT_WINDOW_SEC
    app.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MIN_SIZE)
    app.add_middleware(ImageResizeMiddleware, cache=image_cache, default_spec=default_spec)
    app.add_middleware(
        RateLimitMiddleware,
        limiter=build_rate_limiter(settings.REDIS_URL),
        rules=[
            ("/api/auth/", settings.RATE_LIMIT_AUTH_MAX, window),
            ("/api/admin/", settings.RATE_LIMIT_ADMIN_MAX, window),
            ("/api/", settings.RATE_LIMIT_PUBLIC_MAX, window),
        ],
    )
    app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.MAX_UPLOAD_SIZE)
    app.add_middleware(SecurityMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlingMiddleware, debug=settings.DEBUG)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.allowed_methods_list,
        allow_headers=settings.allowed_headers_list,
    )

    for module in (auth_router, type_router, category_router, product_router,
                   banner_router, settings_router, frontpad_router):
        app.include_router(module.router, prefix="/api")

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {
            "status": "healthy" if getattr(app.state, "db_init_ok", True) else "degraded",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "imageCache": "enabled" if settings.IMAGE_CACHE_ENABLED else "disabled",
        }

    # Plain static files; must stay the last route so it only sees unmatched paths
    os.makedirs(settings.STATIC_DIR, exist_ok=True)
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR), name="static")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run("menu_backend.main:app", host=_settings.HOST, port=_settings.PORT, workers=1)
