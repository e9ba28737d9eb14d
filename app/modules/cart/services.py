# -*- coding: utf-8 -*-
"""
backend/app/modules/cart/services.py

Operaciones de carrito: agregar, quitar, vaciar y resumen con precios
vigentes. Ningún total se persiste; se recalcula en cada lectura.

Autor: Anne Creations
Fecha: 2026-03-04
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.catalog.services import price_line_item
from app.shared.database.types import to_money
from app.shared.errors import NotFoundError, ValidationError

from .models import Cart, CartItem
from .repository import CartRepository

logger = logging.getLogger(__name__)


@dataclass
class CartLine:
    """Línea del carrito con precio vigente (o marcada como no disponible)."""
    item_id: UUID
    product_id: UUID
    option_ids: List[UUID]
    available: bool
    snapshot: Optional[Dict[str, Any]] = None

    @property
    def subtotal(self) -> Decimal:
        if not self.available or self.snapshot is None:
            return Decimal("0.00")
        return to_money(self.snapshot["subtotal"])


@dataclass
class CartSummary:
    cart_id: UUID
    lines: List[CartLine] = field(default_factory=list)

    @property
    def subtotal(self) -> Decimal:
        return to_money(sum((line.subtotal for line in self.lines), Decimal("0")))

    @property
    def item_count(self) -> int:
        return sum(len(line.option_ids) for line in self.lines if line.available)

    @property
    def has_unavailable(self) -> bool:
        return any(not line.available for line in self.lines)


def _dedupe(ids: Sequence[UUID]) -> List[UUID]:
    seen: Dict[UUID, None] = {}
    for x in ids:
        seen.setdefault(x, None)
    return list(seen)


class CartService:

    def __init__(self, repo: Optional[CartRepository] = None):
        self.repo = repo or CartRepository()

    async def get_or_create_cart(self, session: AsyncSession, customer_id: UUID) -> Cart:
        return await self.repo.get_or_create(session, customer_id)

    async def add_item(
        self,
        session: AsyncSession,
        customer_id: UUID,
        product_id: UUID,
        option_ids: Sequence[UUID],
    ) -> Cart:
        """
        Agrega un producto con opciones. Si el producto ya está en el
        carrito, las opciones se fusionan en la misma línea.

        Raises:
            ValidationError: producto u opciones no disponibles.
        """
        cart = await self.repo.get_or_create(session, customer_id)
        existing = next((it for it in cart.items if it.product_id == product_id), None)
        merged = _dedupe(list(existing.option_uuids if existing else []) + list(option_ids))

        # Valida contra el catálogo antes de tocar el carrito
        await price_line_item(session, product_id, merged)

        if existing is not None:
            existing.option_ids = [str(x) for x in merged]
        else:
            cart.items.append(
                CartItem(cart_id=cart.id, product_id=product_id, option_ids=[str(x) for x in merged])
            )
        await session.commit()
        logger.info(
            "cart_item_added customer=%s product_id=%s options=%d",
            str(customer_id)[:8] + "...",
            product_id,
            len(merged),
        )
        return cart

    async def remove_item(self, session: AsyncSession, customer_id: UUID, item_id: UUID) -> Cart:
        cart = await self.repo.get_by_customer(session, customer_id)
        item = next((it for it in cart.items if it.id == item_id), None) if cart else None
        if cart is None or item is None:
            raise NotFoundError("Cart item not found", item_id=str(item_id))
        cart.items.remove(item)
        await session.commit()
        return cart

    async def clear_items(self, session: AsyncSession, customer_id: UUID) -> int:
        """Vacía el carrito dentro de la transacción en curso (sin commit)."""
        cart = await self.repo.get_by_customer(session, customer_id)
        if cart is None or not cart.items:
            return 0
        removed = len(cart.items)
        cart.items.clear()
        await session.flush()
        return removed

    async def clear_cart(self, session: AsyncSession, customer_id: UUID) -> int:
        removed = await self.clear_items(session, customer_id)
        await session.commit()
        return removed

    async def get_cart_summary(self, session: AsyncSession, customer_id: UUID) -> CartSummary:
        """Resumen con precios vigentes; las líneas inválidas quedan como no disponibles."""
        cart = await self.repo.get_or_create(session, customer_id)
        await session.commit()
        summary = CartSummary(cart_id=cart.id)
        for item in cart.items:
            try:
                snapshot = await price_line_item(session, item.product_id, item.option_uuids)
            except ValidationError:
                summary.lines.append(
                    CartLine(item.id, item.product_id, item.option_uuids, available=False)
                )
                continue
            summary.lines.append(
                CartLine(item.id, item.product_id, item.option_uuids, available=True, snapshot=snapshot)
            )
        return summary


__all__ = ["CartLine", "CartService", "CartSummary"]
