# -*- coding: utf-8 -*-
"""
backend/app/shared/storage/local_storage.py

Backend de almacenamiento en filesystem local para archivos descargables.

Las rutas guardadas en el catálogo son relativas a `root`. Cualquier ruta
que resuelva fuera de `root` (../, rutas absolutas, symlinks) se trata
como inexistente.

Autor: Anne Creations
Fecha: 2026-03-04
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional, Protocol

import anyio

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredFile:
    """Archivo localizado en el storage."""
    path: Path
    size: int


class FileStorage(Protocol):
    async def locate(self, relative_path: str) -> Optional[StoredFile]:
        ...


class LocalFileStorage:
    """Storage confinado a un directorio raíz."""

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()

    def resolve(self, relative_path: str) -> Optional[Path]:
        """Ruta absoluta dentro de root, o None si escapa de él."""
        if not relative_path:
            return None
        # Las rutas del catálogo pueden venir con prefijo "/" o separadores de Windows
        cleaned = PurePosixPath(relative_path.replace("\\", "/").lstrip("/"))
        candidate = (self.root / cleaned).resolve()
        if candidate != self.root and self.root not in candidate.parents:
            logger.warning("storage_path_outside_root path=%s", relative_path)
            return None
        return candidate

    async def locate(self, relative_path: str) -> Optional[StoredFile]:
        """Devuelve el archivo si existe y es regular; None en otro caso."""
        resolved = self.resolve(relative_path)
        if resolved is None:
            return None
        apath = anyio.Path(resolved)
        if not await apath.is_file():
            return None
        stat = await apath.stat()
        return StoredFile(path=resolved, size=stat.st_size)


__all__ = ["FileStorage", "LocalFileStorage", "StoredFile"]

# Fin del archivo backend/app/shared/storage/local_storage.py
