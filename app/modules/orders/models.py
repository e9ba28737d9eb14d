# -*- coding: utf-8 -*-
"""
backend/app/modules/orders/models.py

Modelos ORM de órdenes.

- orders: snapshot inmutable de la compra (productos, dirección, totales)
  más el estado de pago. Una orden por checkout.
- order_history: append-only; una fila al crear y una por transición.
- counters: secuencia monótona para order_number.

Autor: Anne Creations
Fecha: 2026-03-07
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import BigInteger, Boolean, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, TimestampMixin
from app.shared.database.types import JSONType, Money, TZDateTime, utcnow

from .enums import OrderStatus


class Order(TimestampMixin, Base):
    """
    Orden de compra.

    Invariante: order_total == totals[code='total'].value
    """

    __tablename__ = "orders"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    order_number: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True)

    customer_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)

    checkout_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("checkouts.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
        doc="Una orden por checkout: reintentos de creación devuelven la misma.",
    )

    billing_address: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    products: Mapped[list] = mapped_column(
        JSONType,
        nullable=False,
        doc="Copia de checkout.line_items al crear la orden.",
    )

    totals: Mapped[list] = mapped_column(
        JSONType,
        nullable=False,
        doc="[{code: subtotal|coupon_discount|total, value, sort_order}]",
    )

    order_total: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="INR")

    order_status: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=OrderStatus.PENDING.value,
    )

    coupon_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid,
        ForeignKey("coupons.id", ondelete="SET NULL"),
        nullable=True,
    )
    coupon_code: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    discount_amount: Mapped[Decimal] = mapped_column(Money(), nullable=False, default=Decimal("0.00"))

    payment_method: Mapped[str] = mapped_column(String(64), nullable=False, default="Pay by RazorPay")
    payment_code: Mapped[str] = mapped_column(String(32), nullable=False, default="razorpay")

    gateway_order_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    gateway_payment_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, unique=True)

    paid_at: Mapped[Optional[datetime]] = mapped_column(TZDateTime(), nullable=True)

    __table_args__ = (
        Index("ix_orders_customer_status", "customer_id", "order_status"),
    )

    @property
    def status(self) -> OrderStatus:
        return OrderStatus(self.order_status)

    def total_line(self, code: str) -> Optional[Decimal]:
        for line in self.totals or []:
            if line.get("code") == code:
                return Decimal(str(line.get("value")))
        return None

    def purchased_option_ids(self) -> List[str]:
        ids: List[str] = []
        for line in self.products or []:
            for opt in line.get("options", []):
                ids.append(str(opt.get("option_id")))
        return ids

    def __repr__(self) -> str:
        return f"<Order number={self.order_number} status={self.order_status} total={self.order_total}>"


class OrderHistory(Base):
    """Registro append-only de estados de la orden."""

    __tablename__ = "order_history"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    order_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    order_status: Mapped[str] = mapped_column(Text, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")
    notify: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(TZDateTime(), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<OrderHistory order_id={self.order_id} status={self.order_status}>"


class Counter(Base):
    """Secuencias con nombre (order_number)."""

    __tablename__ = "counters"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


__all__ = ["Counter", "Order", "OrderHistory"]
