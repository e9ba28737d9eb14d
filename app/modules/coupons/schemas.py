# -*- coding: utf-8 -*-
"""
backend/app/modules/coupons/schemas.py

Esquemas Pydantic de cupones (cliente y administración).

Autor: Anne Creations
Fecha: 2026-03-06
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import CouponType


def _as_utc(v: Optional[datetime]) -> Optional[datetime]:
    if v is None:
        return None
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


# ──────────────────────────────────────────────────────────────────────────────
# Cliente
# ──────────────────────────────────────────────────────────────────────────────

class ApplyCouponRequest(BaseModel):
    code: str = Field(min_length=1, max_length=50)

    @field_validator("code")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("code must not be blank")
        return v


class CouponOut(BaseModel):
    code: str
    name: str
    type: str
    discount: Decimal


class ApplyCouponResponse(BaseModel):
    result: str
    coupon: CouponOut
    subtotal: Decimal
    discount_amount: Decimal
    final_amount: Decimal


# ──────────────────────────────────────────────────────────────────────────────
# Administración
# ──────────────────────────────────────────────────────────────────────────────

class CouponCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    code: str = Field(min_length=1, max_length=50)
    type: CouponType = CouponType.FIXED
    discount: Decimal = Field(gt=0)
    min_amount: Decimal = Field(default=Decimal("0.00"), ge=0)
    max_discount: Decimal = Field(default=Decimal("0.00"), ge=0)
    date_start: datetime
    date_end: datetime
    total_uses: int = Field(default=0, ge=0)
    customer_uses: int = Field(default=0, ge=0)
    status: bool = True
    auto_apply: bool = False

    _utc_dates = field_validator("date_start", "date_end")(_as_utc)

    @field_validator("name", "code")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @model_validator(mode="after")
    def _check_rules(self) -> "CouponCreateRequest":
        if self.type == CouponType.PERCENTAGE and self.discount > 100:
            raise ValueError("percentage discount cannot exceed 100")
        if self.date_end < self.date_start:
            raise ValueError("date_end must be on or after date_start")
        return self

    def to_model_data(self) -> dict:
        data = self.model_dump()
        data["type"] = self.type.value
        return data


class CouponUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    type: Optional[CouponType] = None
    discount: Optional[Decimal] = Field(default=None, gt=0)
    min_amount: Optional[Decimal] = Field(default=None, ge=0)
    max_discount: Optional[Decimal] = Field(default=None, ge=0)
    date_start: Optional[datetime] = None
    date_end: Optional[datetime] = None
    total_uses: Optional[int] = Field(default=None, ge=0)
    customer_uses: Optional[int] = Field(default=None, ge=0)
    status: Optional[bool] = None
    auto_apply: Optional[bool] = None

    _utc_dates = field_validator("date_start", "date_end")(_as_utc)

    def to_changes(self) -> dict:
        data = self.model_dump(exclude_unset=True)
        if data.get("type") is not None:
            data["type"] = CouponType(data["type"]).value
        return data


class CouponAdminOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    code: str
    type: str
    discount: Decimal
    min_amount: Decimal
    max_discount: Decimal
    date_start: datetime
    date_end: datetime
    total_uses: int
    customer_uses: int
    status: bool
    auto_apply: bool
    created_at: datetime


class CouponListResponse(BaseModel):
    items: List[CouponAdminOut]
    total: int
    offset: int
    limit: int


class CouponUsageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    coupon_id: UUID
    customer_id: UUID
    order_id: UUID
    discount_amount: Decimal
    order_total: Decimal
    used_at: datetime


class CouponUsageListResponse(BaseModel):
    items: List[CouponUsageOut]
    total: int


__all__ = [
    "ApplyCouponRequest",
    "ApplyCouponResponse",
    "CouponAdminOut",
    "CouponCreateRequest",
    "CouponListResponse",
    "CouponOut",
    "CouponUpdateRequest",
    "CouponUsageListResponse",
    "CouponUsageOut",
]
