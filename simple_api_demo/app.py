"""
FastAPI application factories for the main and application servers.

Both servers share the same cross-cutting setup (CORS, access log, error
handling); they differ only in their routes.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from starlette.middleware.cors import CORSMiddleware

from . import __version__
from .errors import AppError, app_error_handler
from .handlers import app_router, main_router
from .middleware import (
    CORS_ALLOWED_HEADERS,
    CORS_ALLOWED_METHODS,
    CORS_MAX_AGE,
    AccessLogMiddleware,
)

logger = logging.getLogger(__name__)


def create_app(title: str, router: APIRouter) -> FastAPI:
    """Create a FastAPI app serving ``router`` with the shared middleware stack."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{title} ready")
        yield
        logger.info(f"{title} shutting down")

    app = FastAPI(
        title=title,
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    # Last added middleware is outermost: the access log sees CORS responses too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=CORS_ALLOWED_METHODS,
        allow_headers=CORS_ALLOWED_HEADERS,
        max_age=CORS_MAX_AGE,
    )
    app.add_middleware(AccessLogMiddleware)

    app.add_exception_handler(AppError, app_error_handler)
    app.include_router(router)

    return app


def create_main_app() -> FastAPI:
    return create_app("Main server", main_router)


def create_application_app() -> FastAPI:
    return create_app("Application server", app_router)
