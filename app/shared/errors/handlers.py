# -*- coding: utf-8 -*-
"""
backend/app/shared/errors/handlers.py

Traducción de excepciones de dominio a respuestas JSON:

    {"detail": {"error_code": "...", "message": "...", "request_id": "..."}}

Autor: Anne Creations
Fecha: 2026-03-03
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .commerce_errors import AuthorizationFailure, CommerceError

logger = logging.getLogger(__name__)


async def commerce_error_handler(request: Request, exc: CommerceError) -> JSONResponse:
    detail = exc.to_detail()
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        detail["request_id"] = request_id

    # Los fallos de autorización de descarga no llevan contexto al log
    if isinstance(exc, AuthorizationFailure):
        logger.info("download_authorization_failed path=%s", request.url.path)
    else:
        logger.info(
            "commerce_error code=%s status=%d path=%s",
            exc.error_code,
            exc.http_status,
            request.url.path,
        )
    return JSONResponse(status_code=exc.http_status, content={"detail": detail})


def register_exception_handlers(app: FastAPI) -> None:
    """Registra el handler común para toda la jerarquía CommerceError."""
    app.add_exception_handler(CommerceError, commerce_error_handler)


__all__ = ["commerce_error_handler", "register_exception_handlers"]

# Fin del archivo backend/app/shared/errors/handlers.py
