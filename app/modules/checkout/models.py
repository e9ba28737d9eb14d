# -*- coding: utf-8 -*-
"""
backend/app/modules/checkout/models.py

Modelo ORM para la tabla checkouts (staging entre carrito y orden).

Un checkout congela las líneas del carrito con los precios del momento,
lleva como máximo un cupón y caduca en expires_at. Se convierte en orden
exactamente una vez, al confirmarse el pago.

Autor: Anne Creations
Fecha: 2026-03-05
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, TimestampMixin
from app.shared.database.types import JSONType, Money, TZDateTime


class CheckoutStatus(str, Enum):
    """Estados posibles de un checkout."""
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class CouponSource(str, Enum):
    """Origen del cupón adjunto al checkout."""
    AUTO = "auto"
    MANUAL = "manual"


class Checkout(TimestampMixin, Base):
    """
    Checkout con snapshot de precios.

    Invariante: a lo sumo un checkout 'pending' por cliente
    (índice único parcial uq_checkouts_customer_pending).
    """

    __tablename__ = "checkouts"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    customer_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)

    cart_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid,
        ForeignKey("carts.id", ondelete="SET NULL"),
        nullable=True,
    )

    status: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=CheckoutStatus.PENDING.value,
        doc="Estado actual: pending, paid, cancelled.",
    )

    line_items: Mapped[list] = mapped_column(
        JSONType,
        nullable=False,
        doc="Snapshot [{product_id, product_name, options[{option_id, name, price}], subtotal}].",
    )

    billing_snapshot: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    subtotal_amount: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    discount_amount: Mapped[Decimal] = mapped_column(Money(), nullable=False, default=Decimal("0.00"))
    total_amount: Mapped[Decimal] = mapped_column(Money(), nullable=False)

    coupon_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid,
        ForeignKey("coupons.id", ondelete="SET NULL"),
        nullable=True,
    )
    coupon_code: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    coupon_source: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    declined_coupon_ids: Mapped[list] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        doc="Cupones retirados por el cliente; el auto-apply no los vuelve a adjuntar.",
    )

    expires_at: Mapped[datetime] = mapped_column(TZDateTime(), nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(TZDateTime(), nullable=True)
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(TZDateTime(), nullable=True)

    __table_args__ = (
        Index(
            "uq_checkouts_customer_pending",
            "customer_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
        Index("ix_checkouts_status_expires_at", "status", "expires_at"),
    )

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def seconds_remaining(self, now: datetime) -> int:
        return max(0, int((self.expires_at - now).total_seconds()))

    def is_open(self, now: datetime) -> bool:
        """True si admite cambios (pending y sin caducar)."""
        return self.status == CheckoutStatus.PENDING.value and not self.is_expired(now)

    def __repr__(self) -> str:
        return (
            f"<Checkout id={self.id} customer_id={str(self.customer_id)[:8]}... "
            f"status={self.status} total={self.total_amount}>"
        )


__all__ = ["Checkout", "CheckoutStatus", "CouponSource"]
