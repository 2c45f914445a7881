"""
Application factory for the Sherlouk back-office API.

Run with:
    uvicorn sherlouk_api.app:create_app --factory
or:
    python -m sherlouk_api
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sherlouk_api.core.config import Settings, get_settings
from sherlouk_api.core.errors import PersistenceError, ServiceError
from sherlouk_api.core.logging_config import configure_logging
from sherlouk_api.repositories import DocumentStore, build_repositories
from sherlouk_api.routers import audit as audit_router
from sherlouk_api.routers import auth as auth_router
from sherlouk_api.routers import frontend as frontend_router
from sherlouk_api.routers import tables as tables_router
from sherlouk_api.routers import users as users_router
from sherlouk_api.services.auth_service import DemoAuthenticator

logger = logging.getLogger(__name__)

DEV_ORIGINS = {
    "http://localhost:4028",
    "http://127.0.0.1:4028",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
}


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error(request: Request, exc: ServiceError):
        if isinstance(exc, PersistenceError):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error(exc.message, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        return _error("Request body must be a JSON object", 400)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _error(str(exc.detail), exc.status_code)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("%s %s crashed", request.method, request.url.path)
        return _error("Internal server error", 500)


def _cors_origins(settings: Settings) -> list[str]:
    allowed = set(settings.cors_origins)
    if "*" in allowed:
        return ["*"]
    if settings.app_env != "prod":
        allowed.update(DEV_ORIGINS)
    return sorted(origin for origin in allowed if origin)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app; raises PersistenceError when the store on disk is corrupt."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    store = DocumentStore(settings.data_file)
    store.load()

    app = FastAPI(title="Sherlouk API")
    app.state.settings = settings
    app.state.store = store
    app.state.repositories = build_repositories(store)
    app.state.authenticator = DemoAuthenticator()

    origins = _cors_origins(settings)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    register_error_handlers(app)

    app.include_router(auth_router.router)
    app.include_router(users_router.router)
    app.include_router(tables_router.router)
    app.include_router(audit_router.router)
    # catch-all, keep last
    app.include_router(frontend_router.router)

    logger.info("Serving store %s", settings.data_file)
    return app
