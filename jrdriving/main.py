# jrdriving/main.py
"""
FastAPI application entry point.
Includes CORS, request timing, global error handlers, and all routers.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from jrdriving.config import Settings
from jrdriving.database import build_engine, build_session_factory, create_tables
from jrdriving.errors import AppError
from jrdriving.routers import admin, auth, health, missions, quotes, recruitment
from jrdriving.services.notifier import Notifier
from jrdriving.services.security import TokenIssuer
from jrdriving.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def _field_errors(exc: RequestValidationError) -> dict:
    """Group pydantic errors by dotted field path, dropping the body/query/path prefix."""
    fields = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header", "cookie"):
            loc = loc[1:]
        fields.setdefault(".".join(loc) or "body", []).append(error.get("msg", "Invalid value"))
    return fields


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_FILE or None)

    engine = build_engine(settings)
    notifier = Notifier(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 JR Driving backend starting up...")
        create_tables(engine)
        logger.info("✅ Database tables ready")
        configured = {kind: len(urls) for kind, urls in settings.WEBHOOKS.items() if urls}
        logger.info(f"📡 Webhooks configured: {configured or 'none'}")
        logger.info(f"🌐 Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}{settings.API_PREFIX}")
        yield
        logger.info("🛑 JR Driving backend shutting down...")
        await notifier.drain()
        engine.dispose()

    app = FastAPI(
        title="JR Driving API",
        description="Vehicle convoying: quotes, recruitment, missions and admin dashboard.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.notifier = notifier
    app.state.tokens = TokenIssuer(settings)

    # ── CORS (browser frontend sends the session cookie) ────────────────────
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # ── Request Timing Middleware ────────────────────────────────────────────
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = round((time.time() - start) * 1000, 2)
        logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
        return response

    # ── Error Handlers ───────────────────────────────────────────────────────
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Invalid data", "fields": _field_errors(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)},
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )

    # ── Routers ──────────────────────────────────────────────────────────────
    for module in (auth, missions, quotes, recruitment, admin, health):
        app.include_router(module.router, prefix=settings.API_PREFIX)

    return app


app = create_app()
