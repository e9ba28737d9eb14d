# -*- coding: utf-8 -*-
"""
backend/app/modules/auth/dependencies.py

Dependencias de autenticación JWT para FastAPI.

Provee:
- get_current_claims: payload validado del Bearer token
- get_current_customer_id: UUID del cliente autenticado
- require_admin: exige role=admin en el token

Autor: Anne Creations
Fecha: 2026-03-04
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status

from .security import ROLE_ADMIN, TokenDecodeError, decode_access_token, oauth2_scheme

logger = logging.getLogger(__name__)


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error_code": "invalid_token", "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_claims(
    token: Optional[str] = Depends(oauth2_scheme),
) -> Dict[str, Any]:
    if not token:
        raise _unauthorized("Not authenticated")
    try:
        return decode_access_token(token)
    except TokenDecodeError as e:
        raise _unauthorized(str(e)) from e


async def get_current_customer_id(
    claims: Dict[str, Any] = Depends(get_current_claims),
) -> UUID:
    """
    Dependencia de autenticación para endpoints de cliente.

    Returns:
        UUID del cliente (claim 'sub').
    """
    try:
        return UUID(str(claims["sub"]))
    except ValueError as e:
        raise _unauthorized("Token does not contain a valid customer identifier") from e


async def require_admin(
    claims: Dict[str, Any] = Depends(get_current_claims),
) -> UUID:
    """
    Dependencia que requiere rol admin.

    Raises:
        HTTPException 401: Token inválido
        HTTPException 403: Token sin rol admin
    """
    if claims.get("role") != ROLE_ADMIN:
        logger.warning("admin_access_denied sub=%s", str(claims.get("sub"))[:8] + "...")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error_code": "forbidden", "message": "Admin role required"},
        )
    try:
        return UUID(str(claims["sub"]))
    except ValueError as e:
        raise _unauthorized("Token does not contain a valid identifier") from e


__all__ = ["get_current_claims", "get_current_customer_id", "require_admin"]
# Fin del archivo backend/app/modules/auth/dependencies.py
