# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/__init__.py

Colaborador de catálogo: productos, opciones y precio vigente.
"""

from .models import Product, ProductOption
from .repository import CatalogRepository
from .services import price_line_item

__all__ = ["Product", "ProductOption", "CatalogRepository", "price_line_item"]
