# -*- coding: utf-8 -*-
"""
backend/app/shared/scheduler/scheduler_service.py

Servicio de programación de tareas periódicas usando APScheduler.

No hay instancia global: la aplicación crea un SchedulerService en su
lifespan y lo guarda en app.state. Los jobs son corutinas con
dependencias inyectadas, invocables también fuera del scheduler.

Autor: Anne Creations
Fecha: 2026-03-03
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)


class SchedulerService:
    """
    Envoltorio de AsyncIOScheduler.

    - Jobs por intervalo con kwargs inyectados
    - Una instancia por job (coalesce), tolerancia a retrasos cortos
    """

    def __init__(self, misfire_grace_time: int = 30):
        self._scheduler = AsyncIOScheduler(
            jobstores={"default": MemoryJobStore()},
            executors={"default": AsyncIOExecutor()},
            job_defaults={
                "coalesce": True,  # Combinar ejecuciones perdidas
                "max_instances": 1,  # Una instancia por job
                "misfire_grace_time": misfire_grace_time,
            },
            timezone="UTC",
        )
        self._started = False

    @property
    def running(self) -> bool:
        return self._started

    def start(self) -> None:
        if not self._started:
            self._scheduler.start()
            self._started = True
            logger.info("SchedulerService iniciado jobs=%d", len(self._scheduler.get_jobs()))

    def shutdown(self, wait: bool = True) -> None:
        """
        Detiene el scheduler.

        Args:
            wait: Si True, espera a que terminen los jobs en ejecución
        """
        if self._started:
            self._scheduler.shutdown(wait=wait)
            self._started = False
            logger.info("SchedulerService detenido")

    def add_interval_job(
        self,
        func: Callable[..., Any],
        job_id: str,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        **kwargs: Any,
    ) -> str:
        """
        Agrega (o reemplaza) un job que se ejecuta a intervalos regulares.

        Returns:
            ID del job agregado
        """
        trigger = IntervalTrigger(hours=hours, minutes=minutes, seconds=seconds)
        self._scheduler.add_job(
            func=func,
            trigger=trigger,
            id=job_id,
            name=job_id,
            replace_existing=True,
            kwargs=kwargs,
        )
        logger.info("Job '%s' agregado: cada %dh %dm %ds", job_id, hours, minutes, seconds)
        return job_id

    def remove_job(self, job_id: str) -> bool:
        job = self._scheduler.get_job(job_id)
        if job is None:
            return False
        job.remove()
        logger.info("Job '%s' eliminado", job_id)
        return True

    def get_jobs(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": job.id,
                "name": job.name,
                "next_run": getattr(job, "next_run_time", None),
                "trigger": str(job.trigger),
            }
            for job in self._scheduler.get_jobs()
        ]

    def get_job_status(self, job_id: str) -> Optional[Dict[str, Any]]:
        job = self._scheduler.get_job(job_id)
        if job is None:
            return None
        return {
            "id": job.id,
            "name": job.name,
            "next_run": getattr(job, "next_run_time", None),
            "trigger": str(job.trigger),
        }


__all__ = ["SchedulerService"]

# Fin del archivo backend/app/shared/scheduler/scheduler_service.py
