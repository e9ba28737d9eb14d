# -*- coding: utf-8 -*-
"""
backend/app/shared/scheduler/__init__.py

Sistema de jobs programados usando APScheduler.

Autor: Anne Creations
Fecha: 2026-03-03
"""

from .scheduler_service import SchedulerService

__all__ = ["SchedulerService"]
