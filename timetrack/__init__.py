"""Application factory and top-level wiring for the Time Tracker API.

This module brings together configuration, database setup, middleware, routers
and error handling. Reading :func:`create_app` top to bottom shows every piece
that takes part in serving a request:

* the database tables are created once at startup (``lifespan``);
* CORS only lets the configured front-end origin in;
* every request gets a correlation id and a completion log line;
* domain errors raised by the CRUD helpers become JSON error envelopes;
* the ``/user`` and ``/activity`` routers do the actual work.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.errors import (
    TrackerError,
    http_exception_handler,
    tracker_error_handler,
    validation_exception_handler,
)
from .db.session import engine
from .db.setup import init_db
from .middlewares import RequestIdMiddleware
from .routers import activities as activities_router
from .routers import users as users_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The engine is created once at import time; here we only make sure the
    # schema exists before the first request arrives.
    init_db(engine)
    yield


def create_app() -> FastAPI:
    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.CORS_ORIGIN],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(TrackerError, tracker_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(users_router.router)
    app.include_router(activities_router.router)

    @app.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    return app


__all__ = ["create_app"]
