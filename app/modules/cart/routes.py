# -*- coding: utf-8 -*-
"""
backend/app/modules/cart/routes.py

Rutas de carrito.

Endpoints:
- GET    /api/cart
- POST   /api/cart/items
- DELETE /api/cart/items/{item_id}
- DELETE /api/cart

Autor: Anne Creations
Fecha: 2026-03-04
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.auth.dependencies import get_current_customer_id
from app.shared.database import get_async_session

from .schemas import AddCartItemRequest, CartLineOut, CartOptionOut, CartResponse
from .services import CartService, CartSummary

router = APIRouter(prefix="/cart", tags=["cart"])


def _to_response(summary: CartSummary) -> CartResponse:
    items = []
    for line in summary.lines:
        snapshot = line.snapshot or {}
        items.append(
            CartLineOut(
                item_id=line.item_id,
                product_id=line.product_id,
                product_name=snapshot.get("product_name"),
                available=line.available,
                options=[CartOptionOut(**opt) for opt in snapshot.get("options", [])],
                subtotal=line.subtotal,
            )
        )
    return CartResponse(
        cart_id=summary.cart_id,
        items=items,
        item_count=summary.item_count,
        subtotal=summary.subtotal,
        has_unavailable=summary.has_unavailable,
    )


@router.get("", response_model=CartResponse, summary="Ver carrito con precios vigentes")
async def get_cart(
    session: AsyncSession = Depends(get_async_session),
    customer_id: UUID = Depends(get_current_customer_id),
) -> CartResponse:
    summary = await CartService().get_cart_summary(session, customer_id)
    return _to_response(summary)


@router.post(
    "/items",
    response_model=CartResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Agregar producto al carrito",
)
async def add_cart_item(
    payload: AddCartItemRequest,
    session: AsyncSession = Depends(get_async_session),
    customer_id: UUID = Depends(get_current_customer_id),
) -> CartResponse:
    service = CartService()
    await service.add_item(session, customer_id, payload.product_id, payload.option_ids)
    return _to_response(await service.get_cart_summary(session, customer_id))


@router.delete("/items/{item_id}", response_model=CartResponse, summary="Quitar línea del carrito")
async def remove_cart_item(
    item_id: UUID,
    session: AsyncSession = Depends(get_async_session),
    customer_id: UUID = Depends(get_current_customer_id),
) -> CartResponse:
    service = CartService()
    await service.remove_item(session, customer_id, item_id)
    return _to_response(await service.get_cart_summary(session, customer_id))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="Vaciar carrito")
async def clear_cart(
    session: AsyncSession = Depends(get_async_session),
    customer_id: UUID = Depends(get_current_customer_id),
) -> None:
    await CartService().clear_cart(session, customer_id)


__all__ = ["router"]
