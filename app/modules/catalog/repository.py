# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/repository.py

Lecturas del catálogo usadas por checkout y descargas.

Autor: Anne Creations
Fecha: 2026-03-04
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Product, ProductOption


class CatalogRepository:

    async def get_product(self, session: AsyncSession, product_id: UUID) -> Optional[Product]:
        return await session.get(Product, product_id)

    async def get_option(self, session: AsyncSession, option_id: UUID) -> Optional[ProductOption]:
        return await session.get(ProductOption, option_id)

    async def get_options(
        self,
        session: AsyncSession,
        option_ids: Iterable[UUID],
    ) -> Dict[UUID, ProductOption]:
        ids = list(option_ids)
        if not ids:
            return {}
        result = await session.execute(select(ProductOption).where(ProductOption.id.in_(ids)))
        return {opt.id: opt for opt in result.scalars().all()}

    async def get_options_for_product(
        self,
        session: AsyncSession,
        product_id: UUID,
    ) -> List[ProductOption]:
        result = await session.execute(
            select(ProductOption)
            .where(ProductOption.product_id == product_id)
            .order_by(ProductOption.sort_order, ProductOption.name)
        )
        return list(result.scalars().all())


__all__ = ["CatalogRepository"]
