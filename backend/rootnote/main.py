"""
RootNote Backend — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       with its own PlantStore attached to `app.state.store`.
Who:   uvicorn (`rootnote.main:app`), the `rootnote-api` console script,
       and tests (which pass their own store and settings).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐ ┌────────┐  │
    │  │  Req ID  │→│  Logging    │→│ GZip │→│  CORS  │  │
    │  └──────────┘ └─────────────┘ └──────┘ └────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────────┐ ┌──────────────────┐ │
    │  │ /api/plants[/{id}] CRUD  │ │ GET /api/health  │ │
    │  └──────────────────────────┘ └──────────────────┘ │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐  │
    │  │ Validation→400 │ NotFound→404 │ Storage→500  │  │
    │  └──────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, open the plant store (creates the table)
    Shutdown: close the plant store (disposes the engine)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from rootnote import __version__
from rootnote.config import Settings, settings as default_settings
from rootnote.exceptions import NotFoundError, RootNoteError, StorageError, ValidationError
from rootnote.middleware.logging import RequestLoggingMiddleware, unexpected_error_response
from rootnote.middleware.request_id import RequestIDMiddleware, request_id_var
from rootnote.routes import health, plants
from rootnote.services.plant_store import PlantStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure root logging once, at startup.

    Format: 2024-01-15T12:00:00 [INFO] rootnote.services.plant_store: ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our own access log replaces uvicorn's; SQL echo is opt-in via DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the plant store on startup and close it on shutdown.

    A store that fails to open aborts startup: the API has nothing to serve
    without its table.
    """
    app_settings: Settings = app.state.settings
    store: PlantStore = app.state.store

    setup_logging(app_settings.log_level)
    logger.info("RootNote API starting up...")

    await store.open()

    logger.info("Server ready at http://%s:%d", app_settings.api_host, app_settings.api_port)

    yield

    logger.info("RootNote API shutting down...")
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    return {
        "error": error,
        "message": message,
        "details": details,
        "request_id": request_id_var.get(""),
    }


def _describe_location(loc) -> str:
    # Drop the "body"/"path" prefix FastAPI puts on every location
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the shared error envelope.

    Handler hierarchy:
        RequestValidationError → 400 (body/path failed schema validation)
        ValidationError        → 400
        NotFoundError          → 404
        StorageError           → 500 (generic message; details logged)
        RootNoteError (base)   → 500
        Exception (fallback)   → 500 (route errors are caught earlier, in
                                  RequestLoggingMiddleware; this catches the rest)
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Schema validation failures are client errors: 400 with field detail."""
        errors = [
            {
                "loc": [str(p) for p in err.get("loc", ())],
                "msg": err.get("msg", ""),
                "type": err.get("type", ""),
            }
            for err in exc.errors()
        ]
        message = "; ".join(
            f"{_describe_location(err['loc'])}: {err['msg']}" for err in errors
        ) or "Invalid request"
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", message, {"errors": errors}),
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message),
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        """Never expose driver messages; they are in the server log."""
        logger.error(
            "[%s] Storage error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error", "An internal error occurred. Please try again later."
            ),
        )

    @app.exception_handler(RootNoteError)
    async def handle_app_error(request: Request, exc: RootNoteError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return unexpected_error_response(request_id_var.get(""))


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    store: Optional[PlantStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; defaults to the environment-loaded singleton.
        store:    Plant store to serve; defaults to one built from
                  settings.database_url. It is opened by the lifespan, so a
                  caller that bypasses the lifespan (e.g. httpx ASGITransport
                  in tests) opens it itself.
    """
    settings = settings or default_settings
    if store is None:
        store = PlantStore(settings.database_url, echo=settings.log_level == "DEBUG")

    app = FastAPI(
        title="RootNote API",
        description="Personal plant tracker: list, add, view and edit plant records.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(plants.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console entry point: serve the API on API_HOST:API_PORT."""
    uvicorn.run(
        "rootnote.main:app",
        host=default_settings.api_host,
        port=default_settings.api_port,
        log_level=default_settings.log_level.lower(),
    )


# uvicorn expects `rootnote.main:app` to be importable
app = create_app()
