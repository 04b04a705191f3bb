"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.db import db_manager
from app.exceptions import StoreError
from app.infra.logging_config import LoggingConfig, get_logger
from app.routers.chats_router import chats_router
from app.routers.notes_router import notes_router
from app.routers.stats_router import stats_router
from app.routers.system import router as system_router

logger = get_logger("api")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    # Registered before CORSMiddleware so 500 responses still carry CORS headers
    @app.middleware("http")
    async def unhandled_error_guard(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=500, content={"error": "Internal server error"}
            )


def create_app(testing: bool = False) -> FastAPI:
    """
    Build the API. In testing mode the schema is not created on startup;
    the test suite owns the database.
    """
    settings = get_settings()
    LoggingConfig(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not testing and not settings.is_production:
            db_manager.create_all()
        yield

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    register_exception_handlers(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.include_router(notes_router)
    app.include_router(chats_router)
    app.include_router(stats_router)
    app.include_router(system_router)

    return app


app = create_app()
