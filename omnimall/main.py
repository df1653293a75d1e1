"""FastAPI application entry point.

Omnimall API - campus peer-to-peer marketplace.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from omnimall.errors import OmnimallError
from omnimall.routes import api_router
from omnimall.schemas.notifications import LiveNotificationOut
from omnimall.services.changefeed import ChangeFeed
from omnimall.services.live_notifications import LiveNotificationBoard
from omnimall.services.sms import SendexaClient
from omnimall.settings import get_settings
from omnimall.stores.gateway import Gateway
from omnimall.stores.postgres import close_db, get_session, init_db, ping_db
from omnimall.stores.redis import close_redis, init_redis
from omnimall.stores.storage import StorageClient

logger = logging.getLogger("uvicorn.error")


async def _load_active_notification() -> LiveNotificationOut | None:
    async with get_session() as session:
        notification = await Gateway(session).get_active_live_notification()
        if notification is None:
            return None
        return LiveNotificationOut.model_validate(notification)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Owns every process-wide client: created on startup, closed on shutdown.
    """
    # Startup
    try:
        await init_db()
        await ping_db()
        logger.info("Postgres connected")
    except Exception:
        logger.exception("Postgres init failed")

    try:
        await init_redis()
    except Exception:
        logger.exception("Redis init failed")

    app.state.sms = SendexaClient()
    app.state.storage = StorageClient()
    app.state.change_feed = ChangeFeed()
    app.state.live_board = LiveNotificationBoard(_load_active_notification)
    unsubscribe = app.state.live_board.attach(app.state.change_feed)

    yield

    # Shutdown
    unsubscribe()
    await app.state.storage.close()
    await app.state.sms.close()
    await close_redis()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Campus marketplace API: orders, merchandising, seller verification",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(OmnimallError)
    async def omnimall_exception_handler(request: Request, exc: OmnimallError) -> JSONResponse:
        """Expected failures raised past a service (e.g. read paths)."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": {"code": exc.code, "message": exc.message, "detail": exc.detail}},
        )

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": str(exc) if settings.debug else "Internal server error",
                    "detail": None,
                }
            },
        )

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    # Include API routes
    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "omnimall.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
