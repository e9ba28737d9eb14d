# -*- coding: utf-8 -*-
"""
backend/app/modules/downloads/schemas.py

Esquemas Pydantic de descargas.

Autor: Anne Creations
Fecha: 2026-03-09
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class DownloadTokenRequest(BaseModel):
    order_id: str = Field(min_length=1, max_length=64, description="UUID o número de orden")
    product: str = Field(min_length=1, max_length=255, description="UUID o nombre del producto")
    option: Optional[str] = Field(default=None, max_length=255, description="UUID o nombre de la opción")


class DownloadTokenResponse(BaseModel):
    token: str
    download_url: str
    expires_at: datetime
    product_name: str
    option_name: str
    single_use: bool = False
