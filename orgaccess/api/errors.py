"""
Exception handlers translating the domain error taxonomy to HTTP responses
"""

from typing import Optional, TypeVar

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from orgaccess.core.exceptions import (
    AuthorizationError,
    DomainError,
    EntityNotFoundError,
    RepositoryError,
)

logger = structlog.get_logger()

T = TypeVar("T")


def not_found_if_none(result: Optional[T], detail: str = "Not found") -> T:
    """Turn a service's None sentinel into a 404"""
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
    return result


async def authorization_error_handler(request: Request, exc: AuthorizationError):
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"error": "Forbidden"},
    )


async def domain_error_handler(request: Request, exc: DomainError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": type(exc).__name__, "message": exc.message},
    )


async def entity_not_found_handler(request: Request, exc: EntityNotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "Not found", "message": exc.message},
    )


async def repository_error_handler(request: Request, exc: RepositoryError):
    logger.error(
        "Repository failure",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred"
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    # Starlette resolves handlers along the exception MRO, so the
    # EntityNotFoundError handler wins over the RepositoryError one.
    app.add_exception_handler(AuthorizationError, authorization_error_handler)
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(EntityNotFoundError, entity_not_found_handler)
    app.add_exception_handler(RepositoryError, repository_error_handler)
