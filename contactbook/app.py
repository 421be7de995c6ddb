"""FastAPI application exposing the contact store over HTTP."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from contactbook.core.config import get_settings
from contactbook.core.log import configure_logging
from contactbook.db.create_tables import create_all
from contactbook.domain.errors import (
    ContactError,
    ContactNotFoundError,
    DatabaseTimeoutError,
    ImageTooLargeError,
    PersistenceError,
    ValidationError,
)
from contactbook.routers import contacts as contacts_router
from contactbook.services.contact_service import ContactService

logger = logging.getLogger(__name__)


def _status_for(exc: ContactError) -> int:
    if isinstance(exc, ContactNotFoundError):
        return 404
    if isinstance(exc, ImageTooLargeError):
        return 413
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, DatabaseTimeoutError):
        return 503
    return 500


async def contact_error_handler(request: Request, exc: ContactError) -> JSONResponse:
    status = _status_for(exc)
    if isinstance(exc, PersistenceError):
        logger.error("%s %s -> %s: %s", request.method, request.url.path, status, exc.message)
    return JSONResponse({"detail": exc.message}, status_code=status)


def create_app(service: ContactService | None = None, *, create_tables: bool = True) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``uvicorn --factory contactbook.app:create_app``)."""
    settings = get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        if create_tables:
            create_all()
            logger.info("schema ready (%s)", settings.app_env)
        yield

    app = FastAPI(title="Contact Book API", lifespan=lifespan)
    app.state.contact_service = service or ContactService(settings=settings)
    app.add_exception_handler(ContactError, contact_error_handler)
    app.include_router(contacts_router.router)

    return app
