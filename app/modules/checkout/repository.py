# -*- coding: utf-8 -*-
"""
backend/app/modules/checkout/repository.py

Acceso a datos de checkouts. Las transiciones de estado son UPDATE
condicionales sobre el estado esperado; rowcount indica quién ganó.

Autor: Anne Creations
Fecha: 2026-03-05
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Checkout, CheckoutStatus


class CheckoutRepository:

    async def get_by_id(self, session: AsyncSession, checkout_id: UUID) -> Optional[Checkout]:
        return await session.get(Checkout, checkout_id)

    async def get_pending_for_customer(self, session: AsyncSession, customer_id: UUID) -> Optional[Checkout]:
        result = await session.execute(
            select(Checkout).where(
                Checkout.customer_id == customer_id,
                Checkout.status == CheckoutStatus.PENDING.value,
            )
        )
        return result.scalar_one_or_none()

    async def cancel_pending_for_customer(
        self, session: AsyncSession, customer_id: UUID, now: datetime
    ) -> List[UUID]:
        """Cancela el pending del cliente; devuelve los ids cancelados."""
        result = await session.execute(
            update(Checkout)
            .where(
                and_(
                    Checkout.customer_id == customer_id,
                    Checkout.status == CheckoutStatus.PENDING.value,
                )
            )
            .values(status=CheckoutStatus.CANCELLED.value, cancelled_at=now)
            .returning(Checkout.id)
        )
        return list(result.scalars().all())

    async def cancel_if_pending(self, session: AsyncSession, checkout_id: UUID, now: datetime) -> bool:
        result = await session.execute(
            update(Checkout)
            .where(
                and_(
                    Checkout.id == checkout_id,
                    Checkout.status == CheckoutStatus.PENDING.value,
                )
            )
            .values(status=CheckoutStatus.CANCELLED.value, cancelled_at=now)
        )
        return (result.rowcount or 0) == 1

    async def mark_paid_if_pending(self, session: AsyncSession, checkout_id: UUID, now: datetime) -> bool:
        result = await session.execute(
            update(Checkout)
            .where(
                and_(
                    Checkout.id == checkout_id,
                    Checkout.status == CheckoutStatus.PENDING.value,
                )
            )
            .values(status=CheckoutStatus.PAID.value, completed_at=now)
        )
        return (result.rowcount or 0) == 1

    async def expire_pending(self, session: AsyncSession, now: datetime) -> List[UUID]:
        """Batch: pending con expires_at < now pasan a cancelled. Nunca toca paid.

        Returns:
            Ids de los checkouts cancelados.
        """
        result = await session.execute(
            update(Checkout)
            .where(
                and_(
                    Checkout.status == CheckoutStatus.PENDING.value,
                    Checkout.expires_at < now,
                )
            )
            .values(status=CheckoutStatus.CANCELLED.value, cancelled_at=now)
            .returning(Checkout.id)
        )
        return list(result.scalars().all())


__all__ = ["CheckoutRepository"]
