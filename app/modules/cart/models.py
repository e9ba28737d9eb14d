# -*- coding: utf-8 -*-
"""
backend/app/modules/cart/models.py

Modelos ORM de carrito (carts / cart_items).

El subtotal y el conteo de artículos son derivados: nunca se guardan.

Autor: Anne Creations
Fecha: 2026-03-04
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.shared.database.base import Base, TimestampMixin
from app.shared.database.types import JSONType


class Cart(TimestampMixin, Base):
    """Carrito persistente; uno por cliente (o anónimo para invitados)."""

    __tablename__ = "carts"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    customer_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid,
        nullable=True,
        unique=True,
        doc="Dueño del carrito; NULL para invitados.",
    )

    items: Mapped[List["CartItem"]] = relationship(
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.created_at",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        owner = str(self.customer_id)[:8] + "..." if self.customer_id else "guest"
        return f"<Cart id={self.id} customer={owner}>"


class CartItem(TimestampMixin, Base):
    """Línea de carrito: un producto con las opciones elegidas."""

    __tablename__ = "cart_items"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    cart_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("carts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    product_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)

    option_ids: Mapped[list] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        doc="UUIDs (str) de las opciones seleccionadas.",
    )

    cart: Mapped[Cart] = relationship(back_populates="items")

    @property
    def option_uuids(self) -> List[UUID]:
        return [UUID(str(x)) for x in (self.option_ids or [])]


__all__ = ["Cart", "CartItem"]
