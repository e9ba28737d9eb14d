# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/webhook_routes.py

Webhook de Razorpay.

- POST /api/payments/webhooks/razorpay

Sin autenticación de usuario: la firma HMAC del cuerpo crudo es la
autenticación. Firma o JSON inválidos → 400; cualquier evento procesado
o ignorado → 200.

Autor: Anne Creations
Fecha: 2026-03-08
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database import get_async_session

from ..webhooks import handle_razorpay_webhook

router = APIRouter(prefix="/webhooks", tags=["payments-webhooks"])


@router.post("/razorpay", summary="Webhook Razorpay")
async def razorpay_webhook(
    request: Request,
    x_razorpay_signature: Optional[str] = Header(default=None),
    session: AsyncSession = Depends(get_async_session),
) -> Dict[str, Any]:
    raw_body = await request.body()
    return await handle_razorpay_webhook(session, raw_body, x_razorpay_signature)


__all__ = ["router"]
