"""Contrato de fetchers de plugins.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite intercambiar el catálogo HTTP por un mirror o un fake en tests
  sin acoplar el Core a implementaciones concretas.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import FetchResult, PluginIdentifier


@runtime_checkable
class PluginFetcher(Protocol):
    """Contrato mínimo para obtener un archivo de plugin actualizado.

    Reglas de diseño:
    - `fetch` es asíncrono porque hace I/O de red; la cancelación la decide el llamador.
    - Devuelve un `FetchResult` o lanza `FetchError` con la etapa que falló.
    """

    async def fetch(self, identifier: PluginIdentifier) -> FetchResult:
        """Asegura que la copia local refleja el contenido remoto y devuelve su hash."""

        ...
