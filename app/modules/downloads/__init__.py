# -*- coding: utf-8 -*-
"""
backend/app/modules/downloads/__init__.py

Autorización de descargas: tokens firmados de corta duración para
archivos de productos comprados.
"""

from .models import ConsumedDownloadToken

__all__ = ["ConsumedDownloadToken"]
