# -*- coding: utf-8 -*-
"""
backend/app/modules/cart/repository.py

Repositorio de carritos con creación perezosa idempotente.

Autor: Anne Creations
Fecha: 2026-03-04
"""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Cart, CartItem

logger = logging.getLogger(__name__)


class CartRepository:

    async def get_by_id(self, session: AsyncSession, cart_id: UUID) -> Optional[Cart]:
        return await session.get(Cart, cart_id)

    async def get_by_customer(self, session: AsyncSession, customer_id: UUID) -> Optional[Cart]:
        result = await session.execute(select(Cart).where(Cart.customer_id == customer_id))
        return result.scalar_one_or_none()

    async def get_or_create(self, session: AsyncSession, customer_id: UUID) -> Cart:
        """
        Devuelve el carrito del cliente, creándolo si no existe.

        Dos requests concurrentes pueden intentar crearlo a la vez; el
        perdedor recibe IntegrityError (customer_id único) y relee.
        """
        cart = await self.get_by_customer(session, customer_id)
        if cart is not None:
            return cart

        cart = Cart(customer_id=customer_id, items=[])
        try:
            session.add(cart)
            await session.flush()
            return cart
        except IntegrityError:
            # Conflicto de unique constraint - rollback y re-fetch
            logger.info("cart_create_race customer=%s", str(customer_id)[:8] + "...")
            await session.rollback()
            existing = await self.get_by_customer(session, customer_id)
            if existing is None:
                raise
            return existing

    async def get_item(self, session: AsyncSession, cart_id: UUID, item_id: UUID) -> Optional[CartItem]:
        result = await session.execute(
            select(CartItem).where(CartItem.id == item_id, CartItem.cart_id == cart_id)
        )
        return result.scalar_one_or_none()


__all__ = ["CartRepository"]
