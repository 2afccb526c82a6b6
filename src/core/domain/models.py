"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta del identificador en el borde: si un (name, version)
  llega hasta el fetcher, ya sabemos que mapea a una única ruta local.
- Resultados inmutables y serializables (`model_dump`) para quien los consuma.

Nota:
- Estos modelos describen *qué* es un plugin y un resultado, no *cómo* se descarga.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

_FORBIDDEN_CHARS = ("\\", "\x00")
_RESERVED_SEGMENTS = (".", "..")


def _check_segment(segment: str, *, what: str) -> None:
    if not segment:
        raise ValueError(f"{what} contains an empty path segment")
    if segment in _RESERVED_SEGMENTS:
        raise ValueError(f"{what} contains a reserved path segment: {segment!r}")


class PluginIdentifier(BaseModel):
    """Par (name, version) que nombra un archivo de plugin.

    `name` se trata como ruta separada por `/` (p.ej. `github.com/acme/tool`).
    Se rechaza todo lo que el filesystem podría colapsar (`..`, segmentos vacíos,
    separadores en la versión) para que dos identificadores distintos nunca
    compartan archivo.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=512,
        description="Nombre del plugin, segmentos separados por '/'.",
    )
    version: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Versión del plugin (p.ej. 'v1.0.0').",
    )

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        if any(ch in value for ch in _FORBIDDEN_CHARS):
            raise ValueError("name must not contain backslashes or NUL characters")
        for segment in value.split("/"):
            _check_segment(segment, what="name")
        return value

    @field_validator("version")
    @classmethod
    def _validate_version(cls, value: str) -> str:
        if "/" in value or any(ch in value for ch in _FORBIDDEN_CHARS):
            raise ValueError("version must not contain path separators or NUL characters")
        _check_segment(value, what="version")
        return value

    @property
    def name_segments(self) -> tuple[str, ...]:
        return tuple(self.name.split("/"))

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"


class FetchOutcome(str, Enum):
    """Cómo terminó una descarga condicional exitosa."""

    DOWNLOADED = "downloaded"
    UNCHANGED = "unchanged"


class FetchResult(BaseModel):
    """Resultado etiquetado de `fetch`.

    Por qué un modelo y no solo el hash:
    - Distingue "descargado" de "sin cambios" sin que el llamador compare hashes.
    - El fallo no vive aquí: se propaga como `FetchError` con su etapa.
    """

    model_config = ConfigDict(frozen=True)

    identifier: PluginIdentifier
    outcome: FetchOutcome
    hash: str = Field(
        ...,
        pattern=r"^[0-9a-f]{64}$",
        description="sha-256 en hex (minúsculas) de los bytes actuales en disco.",
    )
    path: Path = Field(
        ...,
        description="Ruta local del archivo cacheado.",
    )

    @property
    def changed(self) -> bool:
        return self.outcome is FetchOutcome.DOWNLOADED
