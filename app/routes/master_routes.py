# -*- coding: utf-8 -*-
"""
backend/app/routes/master_routes.py

Router maestro: todas las rutas de negocio bajo /api.

Módulos montados:
- cart, checkout, coupons (cliente y admin)
- orders (cliente y admin), payments (incluye webhook Razorpay)
- downloads

Autor: Anne Creations
Fecha: 2026-03-09
"""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter

from app.modules.cart.routes import router as cart_router
from app.modules.checkout.routes import admin_router as checkout_admin_router
from app.modules.checkout.routes import router as checkout_router
from app.modules.coupons.admin_routes import router as coupons_admin_router
from app.modules.coupons.routes import router as coupons_router
from app.modules.downloads.routes import router as downloads_router
from app.modules.orders.routes import admin_router as orders_admin_router
from app.modules.orders.routes import router as orders_router
from app.modules.payments.routes import router as payments_router

logger = logging.getLogger(__name__)

api = APIRouter(prefix="/api")

_loaded: List[str] = []  # trazabilidad/debug


def _include(target: APIRouter, router: APIRouter, name: str) -> None:
    """Incluye un router en la capa dada y registra trazabilidad en logs."""
    target.include_router(router)
    _loaded.append(f"{target.prefix or '/'}:{name}")
    logger.debug(
        "Router '%s' montado en prefix '%s' (router.prefix='%s')",
        name,
        target.prefix or "/",
        getattr(router, "prefix", ""),
    )


_include(api, cart_router, "cart")
_include(api, coupons_router, "coupons")
_include(api, checkout_router, "checkout")
_include(api, payments_router, "payments")
_include(api, orders_router, "orders")
_include(api, downloads_router, "downloads")

_include(api, checkout_admin_router, "admin.checkouts")
_include(api, coupons_admin_router, "admin.coupons")
_include(api, orders_admin_router, "admin.orders")


def loaded_routers() -> List[str]:
    return list(_loaded)


__all__ = ["api", "loaded_routers"]

# Fin del archivo backend/app/routes/master_routes.py
