# -*- coding: utf-8 -*-
"""
backend/app/modules/cart/__init__.py

Carrito de compras persistente.
"""

from .models import Cart, CartItem
from .repository import CartRepository
from .services import CartService, CartSummary

__all__ = ["Cart", "CartItem", "CartRepository", "CartService", "CartSummary"]
