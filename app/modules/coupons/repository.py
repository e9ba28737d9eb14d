# -*- coding: utf-8 -*-
"""
backend/app/modules/coupons/repository.py

Repositorios de cupones y del ledger de uso.

Autor: Anne Creations
Fecha: 2026-03-05
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Coupon, CouponUsage


class CouponRepository:

    async def get_by_id(self, session: AsyncSession, coupon_id: UUID) -> Optional[Coupon]:
        return await session.get(Coupon, coupon_id)

    async def get_by_code(
        self,
        session: AsyncSession,
        code: str,
        case_sensitive: bool = False,
    ) -> Optional[Coupon]:
        if case_sensitive:
            stmt = select(Coupon).where(Coupon.code == code)
        else:
            stmt = select(Coupon).where(func.upper(Coupon.code) == code.upper())
        result = await session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def find_auto_apply(
        self,
        session: AsyncSession,
        now: datetime,
        exclude_ids: Iterable[UUID] = (),
    ) -> Optional[Coupon]:
        """Cupón auto-aplicable activo cuya ventana cubre `now` (el más reciente)."""
        stmt = select(Coupon).where(
            Coupon.auto_apply.is_(True),
            Coupon.status.is_(True),
            Coupon.date_start <= now,
            Coupon.date_end >= now,
        )
        excluded = list(exclude_ids)
        if excluded:
            stmt = stmt.where(Coupon.id.not_in(excluded))
        stmt = stmt.order_by(Coupon.created_at.desc()).limit(1)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def lock(self, session: AsyncSession, coupon_id: UUID) -> Optional[Coupon]:
        """
        Relee el cupón con SELECT ... FOR UPDATE para serializar la
        comprobación final de topes entre pagos concurrentes.
        (En SQLite FOR UPDATE se ignora; la escritura ya es serial.)
        """
        result = await session.execute(
            select(Coupon).where(Coupon.id == coupon_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def list_coupons(
        self,
        session: AsyncSession,
        *,
        status: Optional[bool] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Coupon], int]:
        stmt = select(Coupon)
        count_stmt = select(func.count()).select_from(Coupon)
        if status is not None:
            stmt = stmt.where(Coupon.status.is_(status))
            count_stmt = count_stmt.where(Coupon.status.is_(status))
        if search:
            pattern = f"%{search.strip().lower()}%"
            cond = func.lower(Coupon.code).like(pattern) | func.lower(Coupon.name).like(pattern)
            stmt = stmt.where(cond)
            count_stmt = count_stmt.where(cond)
        total = (await session.execute(count_stmt)).scalar_one()
        result = await session.execute(
            stmt.order_by(Coupon.created_at.desc()).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), int(total)

    async def disable_other_auto_apply(self, session: AsyncSession, keep_id: UUID) -> int:
        """Solo un cupón puede ser auto-aplicable: apaga el flag en los demás."""
        result = await session.execute(
            update(Coupon)
            .where(Coupon.auto_apply.is_(True), Coupon.id != keep_id)
            .values(auto_apply=False)
        )
        return result.rowcount or 0


class CouponUsageRepository:
    """Ledger append-only: solo inserciones y conteos."""

    async def count_total(self, session: AsyncSession, coupon_id: UUID) -> int:
        result = await session.execute(
            select(func.count()).select_from(CouponUsage).where(CouponUsage.coupon_id == coupon_id)
        )
        return int(result.scalar_one())

    async def count_for_customer(self, session: AsyncSession, coupon_id: UUID, customer_id: UUID) -> int:
        result = await session.execute(
            select(func.count())
            .select_from(CouponUsage)
            .where(CouponUsage.coupon_id == coupon_id, CouponUsage.customer_id == customer_id)
        )
        return int(result.scalar_one())

    async def get_by_order(self, session: AsyncSession, order_id: UUID) -> Optional[CouponUsage]:
        result = await session.execute(select(CouponUsage).where(CouponUsage.order_id == order_id))
        return result.scalar_one_or_none()

    async def record_usage(
        self,
        session: AsyncSession,
        *,
        coupon_id: UUID,
        customer_id: UUID,
        order_id: UUID,
        discount_amount: Decimal,
        order_total: Decimal,
    ) -> Tuple[CouponUsage, bool]:
        """
        Inserta la fila de uso de una orden.

        Returns:
            (usage, created) - created=False si la orden ya tenía su fila.
        """
        existing = await self.get_by_order(session, order_id)
        if existing is not None:
            return existing, False

        usage = CouponUsage(
            coupon_id=coupon_id,
            customer_id=customer_id,
            order_id=order_id,
            discount_amount=discount_amount,
            order_total=order_total,
        )
        session.add(usage)
        # order_id es único: una segunda inserción para la misma orden falla en flush
        await session.flush()
        return usage, True

    async def list_by_coupon(
        self,
        session: AsyncSession,
        coupon_id: UUID,
        offset: int = 0,
        limit: int = 50,
    ) -> List[CouponUsage]:
        result = await session.execute(
            select(CouponUsage)
            .where(CouponUsage.coupon_id == coupon_id)
            .order_by(CouponUsage.used_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_by_customer(self, session: AsyncSession, customer_id: UUID) -> List[CouponUsage]:
        result = await session.execute(
            select(CouponUsage)
            .where(CouponUsage.customer_id == customer_id)
            .order_by(CouponUsage.used_at.desc())
        )
        return list(result.scalars().all())


__all__ = ["CouponRepository", "CouponUsageRepository"]
