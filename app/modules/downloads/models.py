# -*- coding: utf-8 -*-
"""
backend/app/modules/downloads/models.py

Registro de tokens de descarga consumidos.

Solo se escribe cuando DOWNLOAD_TOKEN_SINGLE_USE=true; en modo por
defecto el token vale para cualquier petición dentro de su expiración.

Autor: Anne Creations
Fecha: 2026-03-09
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base
from app.shared.database.types import TZDateTime, utcnow


class ConsumedDownloadToken(Base):
    __tablename__ = "consumed_download_tokens"

    jti: Mapped[str] = mapped_column(String(64), primary_key=True)

    consumed_at: Mapped[datetime] = mapped_column(TZDateTime(), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<ConsumedDownloadToken jti={self.jti}>"


__all__ = ["ConsumedDownloadToken"]
