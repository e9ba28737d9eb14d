# -*- coding: utf-8 -*-
"""
backend/app/modules/orders/repository.py

Acceso a datos de órdenes, historial y contador de order_number.

Las transiciones de estado son compare-and-set: un UPDATE condicionado
al estado de origen. Solo el request cuyo UPDATE afecta la fila escribe
historial y efectos secundarios.

Autor: Anne Creations
Fecha: 2026-03-07
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .enums import OrderStatus
from .models import Counter, Order, OrderHistory

logger = logging.getLogger(__name__)

ORDER_NUMBER_COUNTER = "order_number"


class OrderRepository:

    # ------------------------------------------------------------------
    # Lecturas
    # ------------------------------------------------------------------
    async def get_by_id(self, session: AsyncSession, order_id: UUID) -> Optional[Order]:
        return await session.get(Order, order_id)

    async def get_by_number(self, session: AsyncSession, order_number: int) -> Optional[Order]:
        result = await session.execute(select(Order).where(Order.order_number == order_number))
        return result.scalar_one_or_none()

    async def get_by_checkout(self, session: AsyncSession, checkout_id: UUID) -> Optional[Order]:
        result = await session.execute(select(Order).where(Order.checkout_id == checkout_id))
        return result.scalar_one_or_none()

    async def get_by_gateway_order_id(self, session: AsyncSession, gateway_order_id: str) -> Optional[Order]:
        result = await session.execute(
            select(Order).where(Order.gateway_order_id == gateway_order_id).limit(1)
        )
        return result.scalar_one_or_none()

    async def list_for_customer(
        self,
        session: AsyncSession,
        customer_id: UUID,
        *,
        status: Optional[OrderStatus] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Order], int]:
        stmt = select(Order).where(Order.customer_id == customer_id)
        count_stmt = select(func.count()).select_from(Order).where(Order.customer_id == customer_id)
        if status is not None:
            stmt = stmt.where(Order.order_status == status.value)
            count_stmt = count_stmt.where(Order.order_status == status.value)
        total = (await session.execute(count_stmt)).scalar_one()
        result = await session.execute(
            stmt.order_by(Order.created_at.desc()).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), int(total)

    async def list_paid_for_customer(self, session: AsyncSession, customer_id: UUID) -> List[Order]:
        result = await session.execute(
            select(Order).where(
                Order.customer_id == customer_id,
                Order.order_status == OrderStatus.PAID.value,
            )
        )
        return list(result.scalars().all())

    async def list_pending_for_checkouts(self, session: AsyncSession, checkout_ids: Iterable[UUID]) -> List[Order]:
        ids = list(checkout_ids)
        if not ids:
            return []
        result = await session.execute(
            select(Order).where(
                Order.checkout_id.in_(ids),
                Order.order_status == OrderStatus.PENDING.value,
            )
        )
        return list(result.scalars().all())

    async def list_history(self, session: AsyncSession, order_id: UUID) -> List[OrderHistory]:
        result = await session.execute(
            select(OrderHistory)
            .where(OrderHistory.order_id == order_id)
            .order_by(OrderHistory.created_at, OrderHistory.id)
        )
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Escrituras
    # ------------------------------------------------------------------
    async def compare_and_set_status(
        self,
        session: AsyncSession,
        order_id: UUID,
        from_statuses: Iterable[OrderStatus],
        to_status: OrderStatus,
        **values: Any,
    ) -> bool:
        """
        UPDATE orders SET order_status=:to WHERE id=:id AND order_status IN (:from).

        Returns:
            True si esta llamada ganó la transición.
        """
        sources = [s.value for s in from_statuses]
        if not sources:
            return False
        result = await session.execute(
            update(Order)
            .where(Order.id == order_id, Order.order_status.in_(sources))
            .values(order_status=to_status.value, **values)
        )
        return (result.rowcount or 0) == 1

    async def add_history(
        self,
        session: AsyncSession,
        order_id: UUID,
        status: OrderStatus,
        comment: str = "",
        notify: bool = False,
    ) -> OrderHistory:
        row = OrderHistory(order_id=order_id, order_status=status.value, comment=comment, notify=notify)
        session.add(row)
        await session.flush()
        return row

    async def next_order_number(self, session: AsyncSession) -> int:
        """
        Incremento atómico del contador con un único upsert:
        INSERT (name, 1) ON CONFLICT (name) DO UPDATE SET value = value + 1
        RETURNING value.
        """
        if session.get_bind().dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        else:
            from sqlalchemy.dialects.sqlite import insert

        stmt = (
            insert(Counter)
            .values(name=ORDER_NUMBER_COUNTER, value=1)
            .on_conflict_do_update(
                index_elements=[Counter.name],
                set_={"value": Counter.value + 1},
            )
            .returning(Counter.value)
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())


__all__ = ["ORDER_NUMBER_COUNTER", "OrderRepository"]
