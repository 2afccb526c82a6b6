"""Logging de la aplicación.

Cada módulo usa `logging.getLogger(__name__)`; aquí solo se decide a dónde van
los registros. Rich se encarga del formato en consola.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from core.config import AppSettings

# Paquetes propios que reciben el handler.
LOGGER_NAMES = ("core", "adapters")


def setup_logging(level: str | int | None = None, *, console: Console | None = None) -> None:
    """Configura los loggers del proyecto con un `RichHandler`.

    Idempotente: llamarla dos veces no duplica handlers, solo ajusta el nivel.
    Sin `level` explícito se usa `AppSettings().log_level`.
    """

    if level is None:
        level = AppSettings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = False
        if not any(isinstance(h, RichHandler) for h in logger.handlers):
            handler = RichHandler(
                console=console or Console(stderr=True),
                show_path=False,
                rich_tracebacks=True,
            )
            handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
            logger.addHandler(handler)
