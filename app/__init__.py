# -*- coding: utf-8 -*-
"""
backend/app/__init__.py

Paquete principal del backend de Anne Creations (checkout, cupones,
órdenes, pagos y descargas de diseños digitales).

Autor: Anne Creations
Fecha: 2026-03-02
"""

# Fin del archivo backend/app/__init__.py
