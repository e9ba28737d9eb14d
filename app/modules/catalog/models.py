# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/models.py

Modelos ORM mínimos del catálogo (products / product_options).

El CRUD del catálogo vive fuera de este backend; aquí solo se leen
precios vigentes (snapshot de checkout) y rutas de archivo (descargas).

Autor: Anne Creations
Fecha: 2026-03-04
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.shared.database.base import Base, TimestampMixin
from app.shared.database.types import Money


class Product(TimestampMixin, Base):
    """Diseño publicado en la tienda."""

    __tablename__ = "products"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Nombre comercial / modelo del diseño (productModel).",
    )

    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    options: Mapped[List["ProductOption"]] = relationship(
        back_populates="product",
        order_by="ProductOption.sort_order",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r}>"


class ProductOption(TimestampMixin, Base):
    """Variante descargable de un diseño (formato de máquina, tamaño...)."""

    __tablename__ = "product_options"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    product_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    price: Mapped[Decimal] = mapped_column(Money(), nullable=False)

    file_path: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Ruta relativa al storage de descargas.",
    )

    mime_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    product: Mapped[Product] = relationship(back_populates="options")

    def __repr__(self) -> str:
        return f"<ProductOption id={self.id} product_id={self.product_id} price={self.price}>"


__all__ = ["Product", "ProductOption"]
