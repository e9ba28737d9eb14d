# -*- coding: utf-8 -*-
"""
backend/app/modules/coupons/services/coupon_engine.py

Motor de cupones sobre un checkout abierto.

Entradas:
- evaluate_auto_apply: busca el cupón auto-aplicable vigente y lo adjunta
  si el checkout califica. Nunca lanza por inelegibilidad: devuelve un
  AutoApplyResult con el motivo ("Add ₹X more to get ...").
- apply_coupon: el cliente escribe un código. Cualquier regla incumplida
  lanza IneligibleCouponError con su kind y los totales no cambian.
- remove_coupon: revierte a totales sin descuento y vuelve a evaluar el
  auto-apply excluyendo el cupón recién retirado.

Sin apilamiento: adjuntar un cupón reemplaza al anterior.
Los métodos hacen flush; el commit es del llamador.

Autor: Anne Creations
Fecha: 2026-03-05
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.settings import get_settings
from app.modules.checkout.models import Checkout, CheckoutStatus, CouponSource
from app.shared.database.types import to_money, utcnow
from app.shared.errors import IneligibleCouponError, ValidationError

from ..enums import IneligibleKind
from ..models import Coupon
from ..repository import CouponRepository, CouponUsageRepository
from .discount import DiscountResult, compute_discount, format_discount

logger = logging.getLogger(__name__)

MAX_CODE_LENGTH = 50


@dataclass
class AutoApplyResult:
    """Resultado informativo del auto-apply (nunca es un error)."""
    applied: bool
    reason: str
    coupon_code: Optional[str] = None
    coupon_name: Optional[str] = None
    coupon_type: Optional[str] = None
    discount_amount: Decimal = Decimal("0.00")
    final_amount: Optional[Decimal] = None
    amount_needed: Optional[Decimal] = None


@dataclass
class AppliedCoupon:
    coupon: Coupon
    calculation: DiscountResult
    result: str  # "applied" | "already_applied"


class CouponEngine:
    """
    Reglas de elegibilidad, selección de auto-apply y adjunto al checkout.
    """

    def __init__(
        self,
        coupons: Optional[CouponRepository] = None,
        usages: Optional[CouponUsageRepository] = None,
        case_sensitive: Optional[bool] = None,
    ):
        self.coupons = coupons or CouponRepository()
        self.usages = usages or CouponUsageRepository()
        self._case_sensitive = case_sensitive

    @property
    def case_sensitive(self) -> bool:
        if self._case_sensitive is None:
            return get_settings().coupon_code_case_sensitive
        return self._case_sensitive

    # ------------------------------------------------------------------
    # Topes de uso (ledger)
    # ------------------------------------------------------------------
    async def usage_cap_violation(
        self,
        session: AsyncSession,
        coupon: Coupon,
        customer_id: UUID,
    ) -> Optional[IneligibleKind]:
        """Devuelve el tope excedido (global o por cliente) o None."""
        if coupon.total_uses > 0:
            used = await self.usages.count_total(session, coupon.id)
            if used >= coupon.total_uses:
                return IneligibleKind.USAGE_LIMIT_REACHED
        if coupon.customer_uses > 0:
            used_by_customer = await self.usages.count_for_customer(session, coupon.id, customer_id)
            if used_by_customer >= coupon.customer_uses:
                return IneligibleKind.CUSTOMER_LIMIT_REACHED
        return None

    # ------------------------------------------------------------------
    # Auto-apply
    # ------------------------------------------------------------------
    async def evaluate_auto_apply(
        self,
        session: AsyncSession,
        checkout: Checkout,
        now: Optional[datetime] = None,
    ) -> AutoApplyResult:
        now = now or utcnow()

        if checkout.coupon_id is not None:
            return AutoApplyResult(
                applied=True,
                reason=f'Coupon "{checkout.coupon_code}" applied! You saved ₹{checkout.discount_amount:.2f}',
                coupon_code=checkout.coupon_code,
                discount_amount=checkout.discount_amount,
                final_amount=checkout.total_amount,
            )

        if not checkout.is_open(now):
            return AutoApplyResult(applied=False, reason="Checkout is no longer open")

        declined = [UUID(str(x)) for x in (checkout.declined_coupon_ids or [])]
        coupon = await self.coupons.find_auto_apply(session, now, exclude_ids=declined)
        if coupon is None:
            return AutoApplyResult(applied=False, reason="No auto-apply coupon available")

        subtotal = to_money(checkout.subtotal_amount)
        if subtotal < to_money(coupon.min_amount):
            needed = to_money(coupon.min_amount - subtotal)
            return AutoApplyResult(
                applied=False,
                reason=f"Add ₹{needed:.2f} more to get {format_discount(coupon.type, coupon.discount)} discount.",
                coupon_code=coupon.code,
                coupon_name=coupon.name,
                coupon_type=coupon.type,
                amount_needed=needed,
            )

        violation = await self.usage_cap_violation(session, coupon, checkout.customer_id)
        if violation is IneligibleKind.USAGE_LIMIT_REACHED:
            return AutoApplyResult(applied=False, reason="Coupon usage limit reached")
        if violation is IneligibleKind.CUSTOMER_LIMIT_REACHED:
            return AutoApplyResult(
                applied=False,
                reason="You have already used this coupon maximum times",
            )

        calc = await self._attach(session, checkout, coupon, CouponSource.AUTO)
        logger.info(
            "coupon_auto_applied checkout_id=%s code=%s discount=%s",
            checkout.id,
            coupon.code,
            calc.discount_amount,
        )
        return AutoApplyResult(
            applied=True,
            reason=f'Coupon "{coupon.code}" applied! You saved ₹{calc.discount_amount:.2f}',
            coupon_code=coupon.code,
            coupon_name=coupon.name,
            coupon_type=coupon.type,
            discount_amount=calc.discount_amount,
            final_amount=calc.final_amount,
        )

    # ------------------------------------------------------------------
    # Aplicación manual
    # ------------------------------------------------------------------
    async def apply_coupon(
        self,
        session: AsyncSession,
        checkout: Checkout,
        code: str,
        now: Optional[datetime] = None,
    ) -> AppliedCoupon:
        """
        Aplica un código al checkout.

        Raises:
            ValidationError: código vacío/mal formado o checkout cerrado.
            IneligibleCouponError: cualquier regla del cupón incumplida.
        """
        now = now or utcnow()
        self._ensure_open(checkout, now)

        normalized = (code or "").strip()
        if not normalized or len(normalized) > MAX_CODE_LENGTH:
            raise ValidationError("Invalid coupon code format")

        coupon = await self.coupons.get_by_code(session, normalized, case_sensitive=self.case_sensitive)
        if coupon is None:
            raise IneligibleCouponError(IneligibleKind.NOT_FOUND.value, "Coupon not found", code=normalized)

        if checkout.coupon_id == coupon.id:
            calc = compute_discount(coupon.type, coupon.discount, checkout.subtotal_amount, coupon.max_discount)
            return AppliedCoupon(coupon=coupon, calculation=calc, result="already_applied")

        await self._check_manual_eligibility(session, checkout, coupon, now)

        calc = await self._attach(session, checkout, coupon, CouponSource.MANUAL)
        logger.info(
            "coupon_applied checkout_id=%s code=%s discount=%s final=%s",
            checkout.id,
            coupon.code,
            calc.discount_amount,
            calc.final_amount,
        )
        return AppliedCoupon(coupon=coupon, calculation=calc, result="applied")

    async def _check_manual_eligibility(
        self,
        session: AsyncSession,
        checkout: Checkout,
        coupon: Coupon,
        now: datetime,
    ) -> None:
        if not coupon.status:
            raise IneligibleCouponError(IneligibleKind.INACTIVE.value, "Coupon is not active", code=coupon.code)
        if now < coupon.date_start:
            raise IneligibleCouponError(
                IneligibleKind.NOT_STARTED.value, "Coupon is not valid yet", code=coupon.code
            )
        if now > coupon.date_end:
            raise IneligibleCouponError(IneligibleKind.EXPIRED.value, "Coupon has expired", code=coupon.code)

        subtotal = to_money(checkout.subtotal_amount)
        min_amount = to_money(coupon.min_amount)
        if subtotal < min_amount:
            raise IneligibleCouponError(
                IneligibleKind.BELOW_MINIMUM.value,
                f"Minimum order amount of ₹{min_amount:.2f} required",
                code=coupon.code,
                amount_needed=str(to_money(min_amount - subtotal)),
            )

        violation = await self.usage_cap_violation(session, coupon, checkout.customer_id)
        if violation is IneligibleKind.USAGE_LIMIT_REACHED:
            raise IneligibleCouponError(violation.value, "Coupon usage limit has been reached", code=coupon.code)
        if violation is IneligibleKind.CUSTOMER_LIMIT_REACHED:
            raise IneligibleCouponError(
                violation.value,
                f"You have already used this coupon. Maximum uses per customer: {coupon.customer_uses}",
                code=coupon.code,
            )

    # ------------------------------------------------------------------
    # Retiro
    # ------------------------------------------------------------------
    async def remove_coupon(
        self,
        session: AsyncSession,
        checkout: Checkout,
        now: Optional[datetime] = None,
    ) -> AutoApplyResult:
        """
        Quita el cupón adjunto y re-evalúa el auto-apply sobre el subtotal
        sin descuento. El cupón retirado no vuelve a auto-adjuntarse.
        """
        now = now or utcnow()
        self._ensure_open(checkout, now)

        removed_id = checkout.coupon_id
        if removed_id is not None:
            declined = [str(x) for x in (checkout.declined_coupon_ids or [])]
            if str(removed_id) not in declined:
                checkout.declined_coupon_ids = declined + [str(removed_id)]
            logger.info("coupon_removed checkout_id=%s code=%s", checkout.id, checkout.coupon_code)

        self._detach(checkout)
        await session.flush()
        return await self.evaluate_auto_apply(session, checkout, now=now)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _ensure_open(checkout: Checkout, now: datetime) -> None:
        if checkout.status != CheckoutStatus.PENDING.value:
            raise ValidationError("Coupons can only be changed on pending checkouts", status=checkout.status)
        if checkout.is_expired(now):
            raise ValidationError("Checkout has expired", checkout_id=str(checkout.id))

    @staticmethod
    def _detach(checkout: Checkout) -> None:
        checkout.coupon_id = None
        checkout.coupon_code = None
        checkout.coupon_source = None
        checkout.discount_amount = Decimal("0.00")
        checkout.total_amount = to_money(checkout.subtotal_amount)

    @staticmethod
    async def _attach(
        session: AsyncSession,
        checkout: Checkout,
        coupon: Coupon,
        source: CouponSource,
    ) -> DiscountResult:
        calc = compute_discount(coupon.type, coupon.discount, checkout.subtotal_amount, coupon.max_discount)
        checkout.coupon_id = coupon.id
        checkout.coupon_code = coupon.code
        checkout.coupon_source = source.value
        checkout.discount_amount = calc.discount_amount
        checkout.total_amount = calc.final_amount
        await session.flush()
        return calc


__all__ = ["AppliedCoupon", "AutoApplyResult", "CouponEngine"]
