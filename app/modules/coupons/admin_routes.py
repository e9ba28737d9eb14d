# -*- coding: utf-8 -*-
"""
backend/app/modules/coupons/admin_routes.py

Administración de cupones.

Endpoints:
- GET   /api/admin/coupons
- POST  /api/admin/coupons
- GET   /api/admin/coupons/{coupon_id}
- PATCH /api/admin/coupons/{coupon_id}
- GET   /api/admin/coupons/{coupon_id}/usages

PROTECTED: requiere rol admin.

Autor: Anne Creations
Fecha: 2026-03-06
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.auth.dependencies import require_admin
from app.shared.database import get_async_session

from .schemas import (
    CouponAdminOut,
    CouponCreateRequest,
    CouponListResponse,
    CouponUpdateRequest,
    CouponUsageListResponse,
    CouponUsageOut,
)
from .services import CouponAdminService

router = APIRouter(
    prefix="/admin/coupons",
    tags=["Admin - Coupons"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=CouponListResponse)
async def list_coupons(
    status_filter: Optional[bool] = Query(default=None, alias="status"),
    search: Optional[str] = Query(default=None, max_length=64),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    session: AsyncSession = Depends(get_async_session),
) -> CouponListResponse:
    items, total = await CouponAdminService().list_coupons(
        session, status=status_filter, search=search, offset=offset, limit=limit
    )
    return CouponListResponse(
        items=[CouponAdminOut.model_validate(c) for c in items],
        total=total,
        offset=offset,
        limit=limit,
    )


@router.post("", response_model=CouponAdminOut, status_code=status.HTTP_201_CREATED)
async def create_coupon(
    payload: CouponCreateRequest,
    session: AsyncSession = Depends(get_async_session),
) -> CouponAdminOut:
    coupon = await CouponAdminService().create_coupon(session, payload.to_model_data())
    return CouponAdminOut.model_validate(coupon)


@router.get("/{coupon_id}", response_model=CouponAdminOut)
async def get_coupon(
    coupon_id: UUID,
    session: AsyncSession = Depends(get_async_session),
) -> CouponAdminOut:
    coupon = await CouponAdminService().get_coupon(session, coupon_id)
    return CouponAdminOut.model_validate(coupon)


@router.patch("/{coupon_id}", response_model=CouponAdminOut)
async def update_coupon(
    coupon_id: UUID,
    payload: CouponUpdateRequest,
    session: AsyncSession = Depends(get_async_session),
) -> CouponAdminOut:
    coupon = await CouponAdminService().update_coupon(session, coupon_id, payload.to_changes())
    return CouponAdminOut.model_validate(coupon)


@router.get("/{coupon_id}/usages", response_model=CouponUsageListResponse)
async def list_coupon_usages(
    coupon_id: UUID,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    session: AsyncSession = Depends(get_async_session),
) -> CouponUsageListResponse:
    rows, total = await CouponAdminService().list_usages(session, coupon_id, offset=offset, limit=limit)
    return CouponUsageListResponse(
        items=[CouponUsageOut.model_validate(r) for r in rows],
        total=total,
    )


__all__ = ["router"]
