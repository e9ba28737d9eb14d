# -*- coding: utf-8 -*-
"""
backend/app/observability/prom.py

Observabilidad Prometheus para Anne Creations.

Incluye:
- Middleware HTTP para conteo y latencia por ruta/estado
- Contadores de dominio (órdenes de pago, pagos, webhooks, descargas)
- Endpoint /metrics compatible con Prometheus (pull model)
- Soporte multiproceso (Prometheus MultiProcess Collector)

Autor: Anne Creations
Fecha: 2026-03-03
"""
from __future__ import annotations

import os
from time import perf_counter
from typing import Optional

from fastapi import FastAPI
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    multiprocess,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

# Contadores/Histogramas de capa HTTP (labels saneados: method/path/status)
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "http_request_latency_seconds",
    "Latency per request (s)",
    ["method", "path", "status"],
)

# Dominio
PAYMENT_ORDERS = Counter(
    "commerce_payment_orders_total",
    "Payment orders by outcome (created in gateway / completed free)",
    ["outcome"],
)
ORDERS_PAID = Counter(
    "commerce_orders_paid_total",
    "Orders transitioned to paid, by source",
    ["source"],
)
WEBHOOK_EVENTS = Counter(
    "commerce_webhook_events_total",
    "Razorpay webhook events by event type and handling status",
    ["event", "status"],
)
DOWNLOAD_TOKENS = Counter(
    "commerce_download_tokens_total",
    "Download token operations",
    ["operation", "result"],
)
SIGNATURE_MISMATCHES = Counter(
    "commerce_signature_mismatches_total",
    "Rejected gateway signatures",
    ["source"],
)
CHECKOUTS_EXPIRED = Counter(
    "commerce_checkouts_expired_total",
    "Pending checkouts cancelled by the expiry sweep",
)


def _route_template(request) -> str:
    """Plantilla de la ruta (/api/orders/{order_id}) para no explotar cardinalidad."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware para instrumentar peticiones HTTP en FastAPI."""

    async def dispatch(self, request, call_next):
        method = request.method

        # Medimos latencia y registramos status una sola vez
        start = perf_counter()
        resp = await call_next(request)
        elapsed = perf_counter() - start

        path = _route_template(request)
        status = str(resp.status_code)
        REQUEST_LATENCY.labels(method, path, status).observe(elapsed)
        REQUEST_COUNT.labels(method, path, status).inc()
        return resp


def _build_registry() -> Optional[CollectorRegistry]:
    """Inicializa CollectorRegistry con soporte multiproceso (si aplica)."""
    if os.environ.get("PROMETHEUS_MULTIPROC_DIR"):
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        return registry
    return None


def mount_metrics(app: FastAPI, path: str = "/metrics") -> None:
    """Registra el endpoint /metrics en la app FastAPI."""
    registry = _build_registry()

    @app.get(path, include_in_schema=False)
    def metrics():
        data = generate_latest(registry) if registry else generate_latest()
        return Response(content=data, media_type=CONTENT_TYPE_LATEST)


def setup_observability(app: FastAPI, http_metrics: bool = True) -> None:
    """Agrega middleware de Prometheus (opcional) y monta el endpoint /metrics."""
    if http_metrics:
        app.add_middleware(PrometheusMiddleware)
    mount_metrics(app)


__all__ = [
    "CHECKOUTS_EXPIRED",
    "DOWNLOAD_TOKENS",
    "ORDERS_PAID",
    "PAYMENT_ORDERS",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SIGNATURE_MISMATCHES",
    "WEBHOOK_EVENTS",
    "PrometheusMiddleware",
    "mount_metrics",
    "setup_observability",
]

# Fin del archivo backend/app/observability/prom.py
