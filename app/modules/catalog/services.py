# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/services.py

Precio vigente de una línea de carrito.

price_line_item devuelve un snapshot serializable (JSON) con los precios
del momento: checkout lo copia tal cual para que cambios posteriores del
catálogo no alteren una compra en curso.

Autor: Anne Creations
Fecha: 2026-03-04
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.types import to_money
from app.shared.errors import ValidationError

from .repository import CatalogRepository


async def price_line_item(
    session: AsyncSession,
    product_id: UUID,
    option_ids: Sequence[UUID],
    repo: Optional[CatalogRepository] = None,
) -> Dict[str, Any]:
    """
    Construye el snapshot de una línea con los precios actuales.

    Raises:
        ValidationError: producto inexistente/inactivo, opción ajena al
            producto o inactiva, o línea sin opciones.
    """
    repo = repo or CatalogRepository()
    if not option_ids:
        raise ValidationError("Select at least one option", product_id=str(product_id))

    product = await repo.get_product(session, product_id)
    if product is None or not product.status:
        raise ValidationError("Product is not available", product_id=str(product_id))

    options_by_id = await repo.get_options(session, option_ids)
    options: List[Dict[str, Any]] = []
    subtotal = Decimal("0")
    for option_id in option_ids:
        option = options_by_id.get(option_id)
        if option is None or option.product_id != product.id or not option.status:
            raise ValidationError(
                "Option is not available for this product",
                product_id=str(product_id),
                option_id=str(option_id),
            )
        price = to_money(option.price)
        subtotal += price
        options.append({"option_id": str(option.id), "name": option.name, "price": str(price)})

    return {
        "product_id": str(product.id),
        "product_name": product.name,
        "options": options,
        "subtotal": str(to_money(subtotal)),
    }


__all__ = ["price_line_item"]
