# -*- coding: utf-8 -*-
"""
backend/app/modules/checkout/jobs/expire_checkouts_job.py

Job programado que cancela los checkouts pendientes que ya caducaron.

Autor: Anne Creations
Fecha: 2026-03-05
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.modules.orders.services import OrderService
from app.observability.prom import CHECKOUTS_EXPIRED
from app.shared.database.database import session_scope
from app.shared.database.types import utcnow
from app.shared.scheduler import SchedulerService

from ..repository import CheckoutRepository

logger = logging.getLogger(__name__)

EXPIRE_CHECKOUTS_JOB_ID = "checkout_expire_pending"


async def _expire(session: AsyncSession, cutoff: datetime) -> int:
    expired_ids = await CheckoutRepository().expire_pending(session, cutoff)
    if expired_ids:
        orders_cancelled = await OrderService().cancel_pending_for_checkouts(
            session, expired_ids, comment="Checkout expired"
        )
        logger.info("expired_checkout_orders_cancelled count=%d", orders_cancelled)
    return len(expired_ids)


async def cleanup_expired(
    session: Optional[AsyncSession] = None,
    now: Optional[datetime] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> int:
    """
    Marca como 'cancelled' los checkouts pending con expires_at < now
    y cancela las órdenes pending asociadas.

    Args:
        session: Sesión async opcional (si no se provee, crea una nueva)
        now: Instante de corte (default: ahora UTC)
        session_factory: Fábrica de sesiones para el caso sin sesión

    Returns:
        Número de checkouts cancelados
    """
    cutoff = now or utcnow()

    if session is not None:
        expired = await _expire(session, cutoff)
        await session.commit()
    else:
        async with session_scope(session_factory) as sess:
            expired = await _expire(sess, cutoff)

    if expired > 0:
        CHECKOUTS_EXPIRED.inc(expired)
        logger.info("Expired %d pending checkouts (cutoff=%s)", expired, cutoff.isoformat())
    else:
        logger.debug("No pending checkouts to expire")
    return expired


def register_checkout_sweep_job(
    scheduler: SchedulerService,
    interval_minutes: int = 5,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> str:
    """
    Registra el barrido periódico de checkouts caducados.

    Returns:
        ID del job registrado
    """
    job_id = scheduler.add_interval_job(
        func=cleanup_expired,
        job_id=EXPIRE_CHECKOUTS_JOB_ID,
        minutes=interval_minutes,
        session_factory=session_factory,
    )
    logger.info("Registered checkout sweep job: id=%s interval=%d min", job_id, interval_minutes)
    return job_id


__all__ = ["EXPIRE_CHECKOUTS_JOB_ID", "cleanup_expired", "register_checkout_sweep_job"]
