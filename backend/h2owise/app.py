# backend/h2owise/app.py

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY

from h2owise import __version__
from h2owise.config import Settings
from h2owise.core.openrouter_qg import QuestionGenerator
from h2owise.core.store import StoreError, SupabaseStore
from h2owise.routes import router

logger = logging.getLogger("h2owise")


# ------------------------------------------------------------
# Middleware to log requests
# ------------------------------------------------------------
class LogRequestMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        logger.info(f"Incoming {request.method} {request.url.path}")
        if logger.isEnabledFor(logging.DEBUG):
            body = await request.body()
            logger.debug(f"body={body.decode('utf-8', errors='replace')}")
        return await call_next(request)


# ------------------------------------------------------------
# Exception handlers
# ------------------------------------------------------------
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content=jsonable_encoder({
            "error": "Invalid request.",
            "detail": exc.errors(),
            "body": exc.body,
        }),
    )


async def store_exception_handler(request: Request, exc: StoreError):
    logger.error(f"Store failure on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.public_message},
    )


async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error."},
    )


# ------------------------------------------------------------
# App factory
# ------------------------------------------------------------
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = SupabaseStore(settings)
        app.state.generator = QuestionGenerator(settings)
        if not settings.store_configured:
            logger.warning("SUPABASE_URL / SUPABASE_KEY not set; store routes will answer 503.")
        logger.info(f"Server ready on port {settings.port}, routes under {settings.api_prefix}")
        try:
            yield
        finally:
            await app.state.store.aclose()
            await app.state.generator.aclose()

    app = FastAPI(title=settings.app_title, version=__version__, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LogRequestMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StoreError, store_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    app.include_router(router, prefix=settings.api_prefix)

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    return app
