"""Adaptadores concretos: cliente HTTP y fetcher del catálogo.

Por qué un paquete aparte:
- Aísla httpx del Core.
- Cada adaptador implementa un contrato de `core.interfaces`.
"""

from adapters.catalog_fetcher import CatalogFetcher, build_download_url, download_plugin

__all__ = [
    "CatalogFetcher",
    "build_download_url",
    "download_plugin",
]
