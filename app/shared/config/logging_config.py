# -*- coding: utf-8 -*-
"""
backend/app/shared/config/logging_config.py

Configuración centralizada de logging.
Soporta formato plain (desarrollo) y json (producción).

Autor: Anne Creations
Fecha: 2026-03-02
"""

import logging.config
from typing import Iterable, Literal

# Loggers de terceros que solo aportan ruido por debajo de WARNING
NOISY_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "apscheduler.executors.default",
    "httpx",
    "httpcore",
)


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO",
    fmt: Literal["plain", "pretty", "json"] = "plain",
    quiet_loggers: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """
    Configura el sistema de logging de la aplicación.

    Args:
        level: Nivel del logger raíz
        fmt: Formato de salida (plain, pretty, json)
        quiet_loggers: Loggers que se fijan en WARNING

    Ejemplos:
        >>> setup_logging("INFO", "plain")
        >>> setup_logging("WARNING", "json")
    """
    use_json = fmt == "json"

    formatters = {
        "default": {
            "format": "%(asctime)s %(levelname)s [%(name)s]: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            "rename_fields": {"levelname": "level", "asctime": "ts"},
        },
    }

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json" if use_json else "default",
            "stream": "ext://sys.stdout",
        }
    }

    loggers = {name: {"level": "WARNING", "propagate": True} for name in quiet_loggers}

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "loggers": loggers,
        "root": {
            "handlers": ["console"],
            "level": level.upper(),
        },
    })


__all__ = ["setup_logging", "NOISY_LOGGERS"]
# Fin del archivo backend/app/shared/config/logging_config.py
