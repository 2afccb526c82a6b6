"""Errores del dominio.

Cada fallo del fetcher lleva la etapa en la que ocurrió (`FetchStage`), así el
llamador sabe si falló el disco, la red o el catálogo sin parsear mensajes.
"""

from __future__ import annotations

from enum import Enum


class FetchStage(str, Enum):
    """Etapas falibles de una descarga condicional."""

    STAT = "stat"
    HASH = "hash"
    URL = "url"
    REQUEST = "request"
    TRANSPORT = "transport"
    MKDIR = "mkdir"
    CREATE = "create"
    WRITE = "write"
    STATUS = "status"


class FetchError(Exception):
    """Fallo de una descarga, etiquetado con su etapa.

    La causa original queda encadenada (`raise ... from exc`).
    """

    def __init__(self, stage: FetchStage, message: str) -> None:
        super().__init__(message)
        self.stage = stage
        self.message = message

    def __str__(self) -> str:
        return self.message


class UnexpectedStatusError(FetchError):
    """El catálogo respondió algo distinto de 200/304."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(FetchStage.STATUS, f"error: {status_code}: {body}")
        self.status_code = status_code
        self.body = body
