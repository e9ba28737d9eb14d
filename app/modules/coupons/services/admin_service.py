# -*- coding: utf-8 -*-
"""
backend/app/modules/coupons/services/admin_service.py

Alta, edición y consulta de cupones desde el panel de administración.

Reglas:
- El código es único. Si los códigos no distinguen mayúsculas se guarda
  en mayúsculas.
- Solo un cupón puede ser auto-aplicable: activar el flag en uno lo
  apaga en los demás.

Autor: Anne Creations
Fecha: 2026-03-06
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.settings import get_settings
from app.shared.errors import ConflictError, NotFoundError, ValidationError

from ..enums import CouponType
from ..models import Coupon, CouponUsage
from ..repository import CouponRepository, CouponUsageRepository

logger = logging.getLogger(__name__)


class CouponAdminService:

    def __init__(
        self,
        coupons: Optional[CouponRepository] = None,
        usages: Optional[CouponUsageRepository] = None,
    ):
        self.coupons = coupons or CouponRepository()
        self.usages = usages or CouponUsageRepository()

    @staticmethod
    def _normalize_code(code: str) -> str:
        code = code.strip()
        if not get_settings().coupon_code_case_sensitive:
            code = code.upper()
        return code

    async def _ensure_code_free(
        self,
        session: AsyncSession,
        code: str,
        exclude_id: Optional[UUID] = None,
    ) -> None:
        existing = await self.coupons.get_by_code(
            session, code, case_sensitive=get_settings().coupon_code_case_sensitive
        )
        if existing is not None and existing.id != exclude_id:
            raise ConflictError("Coupon code already exists", code=code)

    @staticmethod
    def _check_consistency(coupon: Coupon) -> None:
        if coupon.date_end < coupon.date_start:
            raise ValidationError("date_end must be on or after date_start")
        if coupon.type == CouponType.PERCENTAGE.value and coupon.discount > 100:
            raise ValidationError("Percentage discount cannot exceed 100")

    async def create_coupon(self, session: AsyncSession, data: Dict[str, Any]) -> Coupon:
        code = self._normalize_code(data["code"])
        await self._ensure_code_free(session, code)

        coupon = Coupon(**{**data, "code": code})
        self._check_consistency(coupon)
        session.add(coupon)
        try:
            await session.flush()
        except IntegrityError as e:
            await session.rollback()
            raise ConflictError("Coupon code already exists", code=code) from e

        if coupon.auto_apply:
            await self.coupons.disable_other_auto_apply(session, coupon.id)

        await session.commit()
        logger.info("coupon_created id=%s code=%s type=%s", coupon.id, coupon.code, coupon.type)
        return coupon

    async def update_coupon(
        self,
        session: AsyncSession,
        coupon_id: UUID,
        changes: Dict[str, Any],
    ) -> Coupon:
        coupon = await self.get_coupon(session, coupon_id)

        if "code" in changes and changes["code"] is not None:
            code = self._normalize_code(changes["code"])
            await self._ensure_code_free(session, code, exclude_id=coupon.id)
            changes = {**changes, "code": code}

        for key, value in changes.items():
            if value is not None:
                setattr(coupon, key, value)
        self._check_consistency(coupon)

        try:
            await session.flush()
        except IntegrityError as e:
            await session.rollback()
            raise ConflictError("Coupon code already exists", code=coupon.code) from e

        if changes.get("auto_apply"):
            await self.coupons.disable_other_auto_apply(session, coupon.id)

        await session.commit()
        logger.info("coupon_updated id=%s fields=%s", coupon.id, sorted(changes))
        return coupon

    async def get_coupon(self, session: AsyncSession, coupon_id: UUID) -> Coupon:
        coupon = await self.coupons.get_by_id(session, coupon_id)
        if coupon is None:
            raise NotFoundError("Coupon not found", coupon_id=str(coupon_id))
        return coupon

    async def list_coupons(
        self,
        session: AsyncSession,
        *,
        status: Optional[bool] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Coupon], int]:
        return await self.coupons.list_coupons(
            session, status=status, search=search, offset=offset, limit=limit
        )

    async def list_usages(
        self,
        session: AsyncSession,
        coupon_id: UUID,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[CouponUsage], int]:
        await self.get_coupon(session, coupon_id)
        rows = await self.usages.list_by_coupon(session, coupon_id, offset=offset, limit=limit)
        total = await self.usages.count_total(session, coupon_id)
        return rows, total


__all__ = ["CouponAdminService"]
