# -*- coding: utf-8 -*-
"""
backend/app/shared/__init__.py

Infraestructura compartida: configuración, base de datos, errores,
middleware, scheduler y storage.
"""
