# -*- coding: utf-8 -*-
"""
backend/app/modules/downloads/services.py

Autorización de descargas de productos comprados.

Flujo:
1) issue_download_token: verifica que la orden está pagada (y es del
   cliente, si se indica), localiza producto/opción en el snapshot de la
   orden y firma un claim de corta duración.
2) consume_download_token: verifica el claim, re-resuelve la ruta del
   archivo en el catálogo y confirma que existe en el storage.

Cualquier fallo de autorización produce el mismo AuthorizationFailure;
solo la ausencia física del archivo se distingue (StorageMissingError).

Autor: Anne Creations
Fecha: 2026-03-09
"""

from __future__ import annotations

import logging
import mimetypes
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.settings import get_settings
from app.modules.catalog.repository import CatalogRepository
from app.modules.orders.enums import OrderStatus
from app.modules.orders.models import Order
from app.modules.orders.repository import OrderRepository
from app.observability.prom import DOWNLOAD_TOKENS
from app.shared.errors import AuthorizationFailure, StorageMissingError
from app.shared.storage import FileStorage, LocalFileStorage

from .models import ConsumedDownloadToken
from .tokens import read_download_claim, sign_download_claim

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME = re.compile(r'[\\/:*?"<>|\r\n]+')

# order_number es BigInteger
_MAX_ORDER_NUMBER = 2**63 - 1


@dataclass
class IssuedDownload:
    token: str
    expires_at: datetime
    download_url: str
    order_id: UUID
    product_id: UUID
    option_id: UUID
    product_name: str
    option_name: str


@dataclass
class DownloadableFile:
    path: Path
    filename: str
    media_type: str
    size: int


def _as_uuid(value: Any) -> Optional[UUID]:
    try:
        return UUID(str(value).strip())
    except (TypeError, ValueError):
        return None


def _as_order_number(value: str) -> Optional[int]:
    cleaned = str(value).strip().lstrip("#")
    # isdigit() acepta superíndices como "²" que int() rechaza
    if not cleaned.isascii() or not cleaned.isdigit():
        return None
    try:
        number = int(cleaned)
    except ValueError:
        return None
    return number if 0 < number <= _MAX_ORDER_NUMBER else None


def _find_product_line(order: Order, product_identifier: str) -> Optional[Dict[str, Any]]:
    lines: List[Dict[str, Any]] = list(order.products or [])
    product_uuid = _as_uuid(product_identifier)
    if product_uuid is not None:
        for line in lines:
            if _as_uuid(line.get("product_id")) == product_uuid:
                return line
        return None

    needle = product_identifier.strip().lower()
    if not needle:
        return None
    for line in lines:
        if needle in str(line.get("product_name", "")).lower():
            return line
    return None


def _find_option(line: Dict[str, Any], option_identifier: Optional[str]) -> Optional[Dict[str, Any]]:
    options: List[Dict[str, Any]] = list(line.get("options") or [])
    if not options:
        return None
    if option_identifier is None or not option_identifier.strip():
        return options[0]

    option_uuid = _as_uuid(option_identifier)
    if option_uuid is not None:
        return next((o for o in options if _as_uuid(o.get("option_id")) == option_uuid), None)

    needle = option_identifier.strip().lower()
    exact = next((o for o in options if str(o.get("name", "")).lower() == needle), None)
    if exact is not None:
        return exact
    return next((o for o in options if needle in str(o.get("name", "")).lower()), None)


def build_download_filename(product_name: str, option_name: str, file_path: str) -> str:
    """'<producto>-<opción><ext>' sin caracteres problemáticos para cabeceras."""
    ext = PurePosixPath(file_path.replace("\\", "/")).suffix
    base = f"{product_name}-{option_name}".strip()
    base = _UNSAFE_FILENAME.sub("_", base).strip(" .") or "download"
    return f"{base}{ext}"


class DownloadService:
    """
    Emisión y consumo de tokens de descarga.
    """

    def __init__(
        self,
        orders: Optional[OrderRepository] = None,
        catalog: Optional[CatalogRepository] = None,
        storage: Optional[FileStorage] = None,
    ) -> None:
        self.settings = get_settings()
        self.orders = orders or OrderRepository()
        self.catalog = catalog or CatalogRepository()
        self.storage = storage or LocalFileStorage(self.settings.download_storage_root)

    async def _resolve_order(self, session: AsyncSession, order_identifier: str) -> Optional[Order]:
        order_uuid = _as_uuid(order_identifier)
        if order_uuid is not None:
            order = await self.orders.get_by_id(session, order_uuid)
            if order is not None:
                return order
        number = _as_order_number(order_identifier)
        if number is not None:
            return await self.orders.get_by_number(session, number)
        return None

    async def issue_download_token(
        self,
        session: AsyncSession,
        order_identifier: str,
        product_identifier: str,
        option_identifier: Optional[str] = None,
        customer_id: Optional[UUID] = None,
    ) -> IssuedDownload:
        """
        Firma un token de descarga para un producto de una orden pagada.

        Raises:
            AuthorizationFailure: orden inexistente, no pagada, ajena,
                o producto/opción que no forman parte de la orden.
        """
        order = await self._resolve_order(session, order_identifier)

        reason: Optional[str] = None
        line: Optional[Dict[str, Any]] = None
        option: Optional[Dict[str, Any]] = None
        if order is None:
            reason = "order_not_found"
        elif order.order_status != OrderStatus.PAID.value:
            reason = "order_not_paid"
        elif customer_id is not None and order.customer_id != customer_id:
            reason = "ownership"
        else:
            line = _find_product_line(order, product_identifier)
            if line is None:
                reason = "product_not_in_order"
            else:
                option = _find_option(line, option_identifier)
                if option is None:
                    reason = "option_not_in_order"

        if reason is not None:
            DOWNLOAD_TOKENS.labels("issue", "denied").inc()
            logger.info("download_token_denied order=%s reason=%s", order_identifier, reason)
            raise AuthorizationFailure()

        product_id = UUID(str(line["product_id"]))
        option_id = UUID(str(option["option_id"]))
        token, claim = sign_download_claim(order.id, product_id, option_id)
        DOWNLOAD_TOKENS.labels("issue", "ok").inc()
        logger.info(
            "download_token_issued order_id=%s product_id=%s option_id=%s",
            order.id,
            product_id,
            option_id,
        )
        return IssuedDownload(
            token=token,
            expires_at=claim.expires_at,
            download_url=f"{self.settings.public_api_url.rstrip('/')}/api/downloads/{token}",
            order_id=order.id,
            product_id=product_id,
            option_id=option_id,
            product_name=str(line.get("product_name", "")),
            option_name=str(option.get("name", "")),
        )

    async def consume_download_token(self, session: AsyncSession, token: str) -> DownloadableFile:
        """
        Verifica el token y localiza el archivo a servir.

        Raises:
            AuthorizationFailure: token inválido, expirado, ya consumido
                (modo de un solo uso) u orden ya no pagada.
            StorageMissingError: el archivo no está en el storage.
        """
        claim = read_download_claim(token)
        if claim is None:
            DOWNLOAD_TOKENS.labels("consume", "invalid").inc()
            raise AuthorizationFailure()

        order = await self.orders.get_by_id(session, claim.order_id)
        if order is None or order.order_status != OrderStatus.PAID.value:
            DOWNLOAD_TOKENS.labels("consume", "denied").inc()
            logger.info("download_denied order_id=%s reason=order_not_paid", claim.order_id)
            raise AuthorizationFailure()

        product = await self.catalog.get_product(session, claim.product_id)
        option = await self.catalog.get_option(session, claim.option_id)
        if product is None or option is None or option.product_id != product.id or not option.file_path:
            DOWNLOAD_TOKENS.labels("consume", "missing").inc()
            logger.warning(
                "download_option_unresolved product_id=%s option_id=%s",
                claim.product_id,
                claim.option_id,
            )
            raise StorageMissingError()

        stored = await self.storage.locate(option.file_path)
        if stored is None:
            DOWNLOAD_TOKENS.labels("consume", "missing").inc()
            logger.error("download_file_missing option_id=%s path=%s", option.id, option.file_path)
            raise StorageMissingError()

        if self.settings.download_token_single_use:
            await self._mark_consumed(session, claim.jti)

        DOWNLOAD_TOKENS.labels("consume", "ok").inc()
        media_type = (
            option.mime_type
            or mimetypes.guess_type(stored.path.name)[0]
            or "application/octet-stream"
        )
        return DownloadableFile(
            path=stored.path,
            filename=build_download_filename(product.name, option.name, option.file_path),
            media_type=media_type,
            size=stored.size,
        )

    async def _mark_consumed(self, session: AsyncSession, jti: str) -> None:
        if await session.get(ConsumedDownloadToken, jti) is not None:
            DOWNLOAD_TOKENS.labels("consume", "reused").inc()
            raise AuthorizationFailure()
        session.add(ConsumedDownloadToken(jti=jti))
        try:
            await session.commit()
        except IntegrityError as e:
            # Otra petición consumió el mismo token
            await session.rollback()
            DOWNLOAD_TOKENS.labels("consume", "reused").inc()
            raise AuthorizationFailure() from e


__all__ = [
    "DownloadService",
    "DownloadableFile",
    "IssuedDownload",
    "build_download_filename",
]
