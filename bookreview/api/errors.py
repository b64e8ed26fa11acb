"""Map domain errors onto HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from bookreview.domain.errors import AccessDeniedError, CollaboratorError, NotFoundError

logger = logging.getLogger(__name__)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.info("Not found on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def access_denied_handler(request: Request, exc: AccessDeniedError) -> JSONResponse:
    logger.warning("Access denied on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": str(exc)},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def collaborator_error_handler(request: Request, exc: CollaboratorError) -> JSONResponse:
    logger.error("Collaborator failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)})


def register_exception_handlers(application: FastAPI) -> None:
    application.add_exception_handler(NotFoundError, not_found_handler)
    application.add_exception_handler(AccessDeniedError, access_denied_handler)
    application.add_exception_handler(CollaboratorError, collaborator_error_handler)
