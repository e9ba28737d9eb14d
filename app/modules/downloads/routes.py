# -*- coding: utf-8 -*-
"""
backend/app/modules/downloads/routes.py

Rutas de descargas.

- POST /api/downloads/token      (cliente autenticado)
- GET  /api/downloads/{token}    (el token es la autorización)

Autor: Anne Creations
Fecha: 2026-03-09
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.auth.dependencies import get_current_customer_id
from app.shared.database import get_async_session

from .schemas import DownloadTokenRequest, DownloadTokenResponse
from .services import DownloadService

router = APIRouter(prefix="/downloads", tags=["downloads"])


def get_download_service() -> DownloadService:
    return DownloadService()


@router.post("/token", response_model=DownloadTokenResponse, summary="Emitir enlace de descarga")
async def issue_download_token(
    payload: DownloadTokenRequest,
    session: AsyncSession = Depends(get_async_session),
    customer_id: UUID = Depends(get_current_customer_id),
    service: DownloadService = Depends(get_download_service),
) -> DownloadTokenResponse:
    issued = await service.issue_download_token(
        session,
        payload.order_id,
        payload.product,
        option_identifier=payload.option,
        customer_id=customer_id,
    )
    return DownloadTokenResponse(
        token=issued.token,
        download_url=issued.download_url,
        expires_at=issued.expires_at,
        product_name=issued.product_name,
        option_name=issued.option_name,
        single_use=service.settings.download_token_single_use,
    )


@router.get("/{token}", summary="Descargar archivo comprado", response_class=FileResponse)
async def download_file(
    token: str,
    session: AsyncSession = Depends(get_async_session),
    service: DownloadService = Depends(get_download_service),
) -> FileResponse:
    found = await service.consume_download_token(session, token)
    return FileResponse(
        path=found.path,
        media_type=found.media_type,
        filename=found.filename,
    )


__all__ = ["get_download_service", "router"]
