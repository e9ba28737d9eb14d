# -*- coding: utf-8 -*-
"""
backend/app/shared/orm/__init__.py

Módulo de configuración ORM compartida.

Exporta el registro de modelos de todos los módulos.
"""

from .model_registry import register_models

__all__ = ["register_models"]
