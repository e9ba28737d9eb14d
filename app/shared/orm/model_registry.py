# -*- coding: utf-8 -*-
"""
backend/app/shared/orm/model_registry.py

Registro de modelos ORM de todos los módulos.

Importa cada módulo de modelos para que sus tablas queden en
Base.metadata antes de create_all o de resolver relaciones por nombre.

Autor: Anne Creations
Fecha: 2026-03-09
"""

from __future__ import annotations

import logging
from typing import List

logger = logging.getLogger(__name__)

_MODELS_REGISTERED = False


def register_models() -> List[str]:
    """
    Importa los modelos de todos los módulos (idempotente).

    Returns:
        Nombres de las tablas registradas en Base.metadata.
    """
    global _MODELS_REGISTERED

    from app.modules.cart import models as _cart  # noqa: F401
    from app.modules.catalog import models as _catalog  # noqa: F401
    from app.modules.checkout import models as _checkout  # noqa: F401
    from app.modules.coupons import models as _coupons  # noqa: F401
    from app.modules.downloads import models as _downloads  # noqa: F401
    from app.modules.orders import models as _orders  # noqa: F401
    from app.shared.database.base import Base

    tables = sorted(Base.metadata.tables)
    if not _MODELS_REGISTERED:
        logger.info("ORM models registered tables=%d", len(tables))
        _MODELS_REGISTERED = True
    return tables


__all__ = ["register_models"]
