# -*- coding: utf-8 -*-
"""
backend/app/modules/coupons/models.py

Modelos ORM de cupones y su ledger de uso.

- coupons: definición del descuento, ventana de vigencia y topes.
- coupon_usages: ledger append-only; una fila por orden pagada con
  cupón. Es la única fuente para contar usos (global y por cliente).

Autor: Anne Creations
Fecha: 2026-03-05
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, TimestampMixin
from app.shared.database.types import Money, TZDateTime, utcnow

from .enums import CouponType


class Coupon(TimestampMixin, Base):
    """
    Cupón de descuento.

    - discount: monto en ₹ (tipo F) o porcentaje (tipo P)
    - max_discount: tope del descuento; 0 = sin tope
    - total_uses / customer_uses: topes de uso; 0 = ilimitado
    """

    __tablename__ = "coupons"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    name: Mapped[str] = mapped_column(String(128), nullable=False)

    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    type: Mapped[str] = mapped_column(
        String(1),
        nullable=False,
        default=CouponType.FIXED.value,
        doc="F = monto fijo, P = porcentaje.",
    )

    discount: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    min_amount: Mapped[Decimal] = mapped_column(Money(), nullable=False, default=Decimal("0.00"))
    max_discount: Mapped[Decimal] = mapped_column(Money(), nullable=False, default=Decimal("0.00"))

    date_start: Mapped[datetime] = mapped_column(TZDateTime(), nullable=False)
    date_end: Mapped[datetime] = mapped_column(TZDateTime(), nullable=False)

    total_uses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    customer_uses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    auto_apply: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_coupons_auto_apply_status", "auto_apply", "status"),
    )

    @property
    def coupon_type(self) -> CouponType:
        return CouponType(self.type)

    def covers(self, now: datetime) -> bool:
        return self.date_start <= now <= self.date_end

    def __repr__(self) -> str:
        return f"<Coupon code={self.code} type={self.type} discount={self.discount}>"


class CouponUsage(Base):
    """Fila del ledger: nunca se actualiza ni se borra."""

    __tablename__ = "coupon_usages"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    coupon_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("coupons.id", ondelete="RESTRICT"),
        nullable=False,
    )

    customer_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)

    order_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("orders.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
        doc="Una fila por orden: la entrega duplicada del pago no crea otra.",
    )

    discount_amount: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    order_total: Mapped[Decimal] = mapped_column(Money(), nullable=False)

    used_at: Mapped[datetime] = mapped_column(TZDateTime(), nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_coupon_usages_coupon_customer", "coupon_id", "customer_id"),
    )

    def __repr__(self) -> str:
        return f"<CouponUsage coupon_id={self.coupon_id} order_id={self.order_id}>"


__all__ = ["Coupon", "CouponUsage"]
