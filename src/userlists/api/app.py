"""FastAPI application factory.

Every response, including errors, is a JSON envelope:
{"success": true, "data": ...} or {"success": false, "error": "..."}.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import asynccontextmanager, contextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from userlists import __version__
from userlists.config import Settings, load_settings
from userlists.db.backends import Database
from userlists.db.session import close_all, get_database
from userlists.lists.errors import EntryError, ServiceError
from userlists.models.types import Envelope, ErrorEnvelope, HealthStatus

logger = logging.getLogger(__name__)

# Documents the {success: false, error} body for every API route
ERROR_RESPONSES: dict[int | str, dict] = {
    code: {"model": ErrorEnvelope} for code in (400, 404, 409, 500)
}


def get_db(request: Request) -> Database:
    """Dependency to get the database handle.

    Returns:
        Process-wide handle for the backend configured on the app.
    """
    return get_database(request.app.state.settings)


@contextmanager
def reported(message: str) -> Iterator[None]:
    """Turn unexpected exceptions into a generic 500 with the given message.

    Domain errors pass through untouched. Anything else is logged with its
    traceback and never shown to the client.
    """
    try:
        yield
    except EntryError:
        raise
    except Exception as e:
        logger.exception(message)
        raise ServiceError(message) from e


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg", "Invalid value")
    return f"{loc}: {msg}" if loc else msg


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(EntryError)
    async def entry_error_handler(_: Request, exc: EntryError) -> JSONResponse:
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, _validation_message(exc))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error(500, "Internal server error")


@asynccontextmanager
async def lifespan(_: FastAPI):
    try:
        yield
    finally:
        close_all()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        settings: Optional configuration. Defaults to the environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = load_settings()

    app = FastAPI(
        title="X Username Manager API",
        description="Following and followers username lists",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Browser frontends call this API directly
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _install_error_handlers(app)

    # Include routes
    from userlists.api.routes import search, usernames

    app.include_router(usernames.router, prefix="/api", responses=ERROR_RESPONSES)
    app.include_router(search.router, prefix="/api", responses=ERROR_RESPONSES)

    @app.get("/")
    def root() -> dict:
        return {
            "success": True,
            "data": {"message": "X Username Manager API", "status": "running"},
        }

    @app.get("/api/health", response_model=Envelope[HealthStatus])
    def health_check(request: Request) -> Envelope[HealthStatus]:
        """Health check endpoint."""
        with reported("Health check failed"):
            backend = request.app.state.settings.resolved_backend
        return Envelope[HealthStatus](
            data=HealthStatus(
                status="ok",
                timestamp=datetime.now(timezone.utc),
                backend=backend,
            )
        )

    return app


# Default app instance
app = create_app()
