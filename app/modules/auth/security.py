# -*- coding: utf-8 -*-
"""
backend/app/modules/auth/security.py

Creación / decodificación de JWT de acceso (python-jose, HS256).

La emisión de tokens de cliente pertenece al módulo de cuentas; aquí
solo se valida lo que llega en Authorization: Bearer <token>.
create_access_token queda disponible para operaciones internas y pruebas.

Autor: Anne Creations
Fecha: 2026-03-04
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union
from uuid import UUID

from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from app.core.settings import get_settings

# tokenUrl apunta al login del módulo de cuentas
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

ROLE_CUSTOMER = "customer"
ROLE_ADMIN = "admin"


class TokenDecodeError(Exception):
    """Error al decodificar/validar un token JWT."""


def create_access_token(
    subject: Union[str, UUID],
    role: str = ROLE_CUSTOMER,
    expires_delta: Optional[timedelta] = None,
    **extra: Any,
) -> str:
    """
    Crea un JWT con claims 'sub' (UUID del cliente) y 'role'.
    """
    settings = get_settings()
    now = datetime.now(tz=timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode: Dict[str, Any] = {
        "sub": str(subject),
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    if extra:
        to_encode.update(extra)
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decodifica y valida un JWT. Lanza TokenDecodeError si es inválido/expirado.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise TokenDecodeError("Token inválido o expirado") from e

    sub = payload.get("sub")
    if sub is None or not str(sub).strip():
        raise TokenDecodeError("Token sin 'sub'")
    # Los tokens de descarga comparten algoritmo; nunca valen como acceso
    if payload.get("token_type") not in (None, "access"):
        raise TokenDecodeError("Tipo de token no válido para acceso")
    return payload


__all__ = [
    "ROLE_ADMIN",
    "ROLE_CUSTOMER",
    "TokenDecodeError",
    "create_access_token",
    "decode_access_token",
    "oauth2_scheme",
]
# Fin del archivo backend/app/modules/auth/security.py
