# -*- coding: utf-8 -*-
"""
backend/app/modules/downloads/tokens.py

Firma y verificación del claim de descarga (python-jose, HS256).

Claim: {token_type: "download", order_id, product_id, option_id, iat, exp, jti}

Autor: Anne Creations
Fecha: 2026-03-09
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple
from uuid import UUID, uuid4

from jose import JWTError, jwt

from app.core.settings import get_settings

TOKEN_TYPE = "download"


@dataclass(frozen=True)
class DownloadClaim:
    order_id: UUID
    product_id: UUID
    option_id: UUID
    jti: str
    expires_at: datetime


def sign_download_claim(
    order_id: UUID,
    product_id: UUID,
    option_id: UUID,
    expires_minutes: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Tuple[str, DownloadClaim]:
    """Firma un claim nuevo. Devuelve (token, claim)."""
    settings = get_settings()
    now = now or datetime.now(tz=timezone.utc)
    minutes = expires_minutes or settings.download_token_expire_minutes
    expire = now + timedelta(minutes=minutes)
    claim = DownloadClaim(
        order_id=order_id,
        product_id=product_id,
        option_id=option_id,
        jti=uuid4().hex,
        expires_at=expire,
    )
    to_encode: Dict[str, Any] = {
        "token_type": TOKEN_TYPE,
        "order_id": str(order_id),
        "product_id": str(product_id),
        "option_id": str(option_id),
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
        "jti": claim.jti,
    }
    token = jwt.encode(to_encode, settings.download_secret, algorithm=settings.jwt_algorithm)
    return token, claim


def read_download_claim(token: str) -> Optional[DownloadClaim]:
    """
    Verifica firma, expiración y tipo. None si algo no cuadra.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.download_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None

    if payload.get("token_type") != TOKEN_TYPE or not payload.get("jti"):
        return None
    try:
        return DownloadClaim(
            order_id=UUID(str(payload["order_id"])),
            product_id=UUID(str(payload["product_id"])),
            option_id=UUID(str(payload["option_id"])),
            jti=str(payload["jti"]),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError):
        return None


__all__ = ["TOKEN_TYPE", "DownloadClaim", "read_download_claim", "sign_download_claim"]
