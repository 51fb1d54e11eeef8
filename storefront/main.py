# storefront/main.py
# FastAPI entry point. Backends are chosen from settings once, in the lifespan handler.
# Run with: uvicorn --factory storefront.main:create_app

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.api import auth, cart, orders, products, upload
from storefront.core.config import Settings, get_settings
from storefront.core.context import AppContext, build_context
from storefront.core.errors import StorefrontError

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, ctx: AppContext | None = None) -> FastAPI:
    """
    Builds the application.

    Args:
        settings: defaults to settings read from the environment
        ctx: prebuilt context (tests); built from settings at startup otherwise
    """
    settings = settings or (ctx.settings if ctx else get_settings())
    logging.basicConfig(level=settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 Storefront API starting up...")
        owns_context = ctx is None
        app.state.ctx = ctx or build_context(settings)
        for name, value in settings.summary().items():
            logger.info(f"  {name}: {value}")

        yield

        logger.info("🛑 Storefront API shutting down...")
        if owns_context:
            app.state.ctx.close()

    app = FastAPI(
        title="Storefront API",
        description="E-commerce demo API with swappable local / AWS backends",
        version="1.0.0",
        lifespan=lifespan,
    )

    if settings.ENVIRONMENT == "development":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(products.router, prefix="/api/products", tags=["products"])
    app.include_router(cart.router, prefix="/api/cart", tags=["cart"])
    app.include_router(orders.router, prefix="/api/orders", tags=["orders"])
    app.include_router(upload.router, prefix="/api/upload", tags=["upload"])

    if settings.STORAGE_TYPE == "local":
        upload_dir = Path(settings.UPLOAD_DIR)
        upload_dir.mkdir(parents=True, exist_ok=True)
        app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=upload_dir), name="uploads")

    @app.get("/api/health", tags=["health"])
    async def health():
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "config": settings.summary(),
        }

    @app.get("/api/config", tags=["health"])
    async def config():
        summary = settings.summary()
        return {key: summary[key] for key in ("storageType", "reviewStore", "dbType")}

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request, exc: StorefrontError):
        if exc.status_code >= 500:
            logger.error(f"[Error] {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if settings.ENVIRONMENT == "development" else "An error occurred",
            },
        )

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
