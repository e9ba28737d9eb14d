# -*- coding: utf-8 -*-
"""
backend/app/shared/storage/__init__.py

Backends de almacenamiento de archivos.
"""

from .local_storage import FileStorage, LocalFileStorage, StoredFile

__all__ = ["FileStorage", "LocalFileStorage", "StoredFile"]
