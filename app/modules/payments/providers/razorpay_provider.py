# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/providers/razorpay_provider.py

Proveedor Razorpay: creación de órdenes en el gateway.

Usa la API REST (POST /orders) con basic auth key_id:key_secret.
Montos en paise (entero). Cualquier error de transporte, timeout o
respuesta no 2xx se traduce a PaymentGatewayError.

Autor: Anne Creations
Fecha: 2026-03-08
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional, Protocol

import httpx

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.shared.database.types import from_paise, to_paise
from app.shared.errors import PaymentGatewayError

logger = logging.getLogger(__name__)


@dataclass
class GatewayOrder:
    """Orden creada en el gateway."""
    id: str
    amount: Decimal
    currency: str
    status: str
    provider: str = "razorpay"


class PaymentGateway(Protocol):
    async def create_order(
        self,
        amount: Decimal,
        currency: str,
        receipt: str,
        notes: Optional[Dict[str, str]] = None,
    ) -> GatewayOrder:
        ...


class RazorpayGateway:
    """
    Cliente mínimo de la API de órdenes de Razorpay.

    El cliente httpx se crea por llamada salvo que se inyecte uno
    (tests con httpx.MockTransport).
    """

    def __init__(
        self,
        settings: Optional[PaymentsSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_payments_settings()
        self._client = client

    @property
    def is_configured(self) -> bool:
        return self.settings.is_configured

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            self.settings.gateway_timeout_seconds,
            connect=self.settings.gateway_connect_timeout_seconds,
        )

    async def _post(self, url: str, payload: Dict[str, Any]) -> httpx.Response:
        auth = (self.settings.razorpay_key_id or "", self.settings.razorpay_key_secret or "")
        if self._client is not None:
            return await self._client.post(url, json=payload, auth=auth, timeout=self._timeout())
        async with httpx.AsyncClient(timeout=self._timeout()) as client:
            return await client.post(url, json=payload, auth=auth)

    async def create_order(
        self,
        amount: Decimal,
        currency: str,
        receipt: str,
        notes: Optional[Dict[str, str]] = None,
    ) -> GatewayOrder:
        """
        Crea una orden en Razorpay.

        Raises:
            PaymentGatewayError: gateway no configurado, timeout, error de
                red o respuesta no exitosa.
        """
        if not self.is_configured:
            raise PaymentGatewayError("Payment gateway is not configured")

        url = f"{self.settings.razorpay_api_base_url.rstrip('/')}/orders"
        payload = {
            "amount": to_paise(amount),
            "currency": currency,
            "receipt": receipt[:40],
            "notes": notes or {},
        }

        try:
            response = await self._post(url, payload)
        except httpx.TimeoutException as e:
            logger.error("razorpay_create_order_timeout receipt=%s", receipt)
            raise PaymentGatewayError("Payment gateway timed out", provider="razorpay") from e
        except httpx.HTTPError as e:
            logger.error("razorpay_create_order_transport_error receipt=%s error=%s", receipt, e)
            raise PaymentGatewayError("Payment gateway unavailable", provider="razorpay") from e

        if response.status_code // 100 != 2:
            logger.error(
                "razorpay_create_order_failed status=%s body=%s",
                response.status_code,
                response.text[:200],
            )
            raise PaymentGatewayError(
                "Payment gateway rejected the order",
                provider="razorpay",
                gateway_status=response.status_code,
            )

        try:
            data = response.json()
            order = GatewayOrder(
                id=str(data["id"]),
                amount=from_paise(int(data["amount"])),
                currency=str(data.get("currency", currency)),
                status=str(data.get("status", "created")),
            )
        except (ValueError, KeyError, TypeError) as e:
            raise PaymentGatewayError("Malformed response from payment gateway", provider="razorpay") from e

        logger.info("razorpay_order_created id=%s amount=%s receipt=%s", order.id, order.amount, receipt)
        return order


def get_payment_gateway() -> PaymentGateway:
    """Dependencia FastAPI: gateway por defecto (sobrescribible en tests)."""
    return RazorpayGateway()


__all__ = ["GatewayOrder", "PaymentGateway", "RazorpayGateway", "get_payment_gateway"]
