"""
Gestionnaires d'exceptions globaux pour l'API.
"""

import logging
import time
import traceback
from typing import Union

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from carte_loyers.api.config.settings import settings
from carte_loyers.api.utils.exceptions import CarteLoyersException

logger = logging.getLogger(__name__)


async def carte_loyers_exception_handler(request: Request, exc: CarteLoyersException):
    """Gestionnaire pour les exceptions de l'application (sources, cache, index)."""
    log = logger.info if exc.status_code < 500 else logger.error
    log(f"CarteLoyersException: {exc.detail} - URL: {request.url}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "error_code": exc.error_code,
            "detail": exc.detail,
            "type": "application_error",
            "path": str(request.url.path),
            "timestamp": time.time(),
        },
        headers=exc.headers,
    )


async def http_exception_handler(
    request: Request, exc: Union[HTTPException, StarletteHTTPException]
):
    """Gestionnaire pour les exceptions HTTP standard."""
    logger.error(f"HTTP Exception: {exc.detail} - URL: {request.url} - Status: {exc.status_code}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "detail": exc.detail,
            "type": "http_error",
            "path": str(request.url.path),
            "timestamp": time.time(),
            "status_code": exc.status_code,
        },
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Gestionnaire pour les erreurs de validation Pydantic."""
    logger.error(f"Validation error: {exc.errors()} - URL: {request.url}")

    formatted_errors = [
        {
            "field": ".".join(str(loc) for loc in error.get("loc", ())),
            "message": error.get("msg", ""),
            "type": error.get("type", "value_error"),
        }
        for error in exc.errors()
    ]

    return JSONResponse(
        status_code=422,
        content={
            "error": True,
            "detail": "Erreurs de validation",
            "type": "validation_error",
            "path": str(request.url.path),
            "timestamp": time.time(),
            "errors": formatted_errors,
        },
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Gestionnaire pour toutes les autres exceptions non gérées."""
    logger.error(f"Unhandled exception: {str(exc)} - URL: {request.url}", exc_info=True)

    content = {
        "error": True,
        "detail": "Une erreur interne est survenue",
        "type": "internal_error",
        "path": str(request.url.path),
        "timestamp": time.time(),
    }
    # En mode développement, inclure plus de détails
    if settings.DEBUG:
        content["detail"] = str(exc)
        content["traceback"] = traceback.format_exc().split("\n")
    return JSONResponse(status_code=500, content=content)
