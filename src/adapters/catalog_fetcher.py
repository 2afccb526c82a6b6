"""Fetcher del catálogo de plugins (descarga condicional).

Flujo:
- Hash de la copia local (si existe) -> header `X-Plugin-Hash`.
- 304 => sin cambios, se reutiliza el hash local.
- 200 => se escribe el archivo y se recalcula el hash desde disco.
- Otro status => `UnexpectedStatusError` con el código y el body.

Notas:
- Un cliente HTTP nuevo por llamada (aislamiento entre llamadas).
- No hay reintentos aquí: los hace `RetryingTransport`.
- Una descarga cancelada puede dejar un archivo parcial; no hay rollback ni locks.
"""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path
from urllib.parse import quote

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.errors import FetchError, FetchStage, UnexpectedStatusError
from core.domain.models import FetchOutcome, FetchResult, PluginIdentifier
from core.interfaces.fetcher import PluginFetcher
from core.services.archive_cache import ArchiveCache

LOG = logging.getLogger(__name__)

HASH_HEADER = "X-Plugin-Hash"
DOWNLOAD_SEGMENT = "download"
DIR_MODE = 0o755


def _make_dirs(directory: Path) -> None:
    """Crea `directory` y sus ancestros faltantes, todos con `DIR_MODE`.

    `Path.mkdir(parents=True)` ignora `mode` en los ancestros intermedios.
    """

    missing: list[Path] = []
    current = directory
    while not current.exists():
        missing.append(current)
        if current.parent == current:
            break
        current = current.parent
    for d in reversed(missing):
        d.mkdir(mode=DIR_MODE, exist_ok=True)


def build_download_url(base_url: str, identifier: PluginIdentifier) -> str:
    """`{base_url}/download/{name}/{version}` como URL absoluta canónica."""

    try:
        base = httpx.URL(base_url)
    except httpx.InvalidURL as exc:
        raise FetchError(FetchStage.URL, f"failed to parse base URL {base_url!r}: {exc}") from exc
    if base.scheme not in ("http", "https") or not base.host:
        raise FetchError(FetchStage.URL, f"base URL must be absolute http(s): {base_url!r}")

    segments = [quote(segment, safe="") for segment in identifier.name_segments]
    segments.append(quote(identifier.version, safe=""))
    path = posixpath.join(base.path or "/", DOWNLOAD_SEGMENT, *segments)
    try:
        endpoint = base.copy_with(path=path)
    except httpx.InvalidURL as exc:
        raise FetchError(FetchStage.URL, f"failed to parse endpoint URL: {exc}") from exc
    return str(endpoint)


class CatalogFetcher(PluginFetcher):
    """Mantiene `<cache>/<name>/<version>.zip` al día contra el catálogo."""

    def __init__(
        self,
        cache: ArchiveCache | None = None,
        *,
        base_url: str | None = None,
        settings: AppSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._cache = cache or ArchiveCache(self._settings.cache_dir)
        self._base_url = base_url or self._settings.catalog_base_url
        self._transport = transport

    @property
    def cache(self) -> ArchiveCache:
        return self._cache

    async def fetch(self, identifier: PluginIdentifier) -> FetchResult:
        path = self._cache.archive_path(identifier)
        local_hash = self._cache.local_hash(identifier)
        url = build_download_url(self._base_url, identifier)

        async with build_async_client(self._settings, transport=self._transport) as client:
            request = self._build_request(client, url, local_hash)
            response = await self._send(client, request)
            try:
                if response.status_code == httpx.codes.NOT_MODIFIED:
                    return self._unchanged(identifier, path, local_hash)
                if response.status_code == httpx.codes.OK:
                    return await self._store(identifier, path, response)
                body = await self._read_body(response)
                raise UnexpectedStatusError(response.status_code, body)
            finally:
                await response.aclose()

    def _build_request(
        self, client: httpx.AsyncClient, url: str, local_hash: str | None
    ) -> httpx.Request:
        headers = {HASH_HEADER: local_hash} if local_hash else None
        try:
            return client.build_request("GET", url, headers=headers)
        except (httpx.HTTPError, ValueError) as exc:
            raise FetchError(FetchStage.REQUEST, f"failed to create request: {exc}") from exc

    async def _send(self, client: httpx.AsyncClient, request: httpx.Request) -> httpx.Response:
        try:
            return await client.send(request, stream=True)
        except httpx.HTTPError as exc:
            raise FetchError(FetchStage.TRANSPORT, f"failed to call service: {exc}") from exc

    def _unchanged(
        self, identifier: PluginIdentifier, path: Path, local_hash: str | None
    ) -> FetchResult:
        if local_hash is None:
            raise FetchError(
                FetchStage.STATUS,
                f"catalog answered 304 for {identifier} but no local archive exists",
            )
        LOG.debug("%s not modified (%s)", identifier, local_hash)
        return FetchResult(
            identifier=identifier,
            outcome=FetchOutcome.UNCHANGED,
            hash=local_hash,
            path=path,
        )

    async def _store(
        self, identifier: PluginIdentifier, path: Path, response: httpx.Response
    ) -> FetchResult:
        try:
            _make_dirs(path.parent)
        except OSError as exc:
            raise FetchError(FetchStage.MKDIR, f"failed to create directory: {exc}") from exc

        try:
            fh = open(path, "wb")
        except OSError as exc:
            raise FetchError(FetchStage.CREATE, f"failed to create file {str(path)!r}: {exc}") from exc

        with fh:
            try:
                async for chunk in response.aiter_bytes():
                    fh.write(chunk)
            except (httpx.HTTPError, OSError) as exc:
                raise FetchError(FetchStage.WRITE, f"failed to write response: {exc}") from exc

        digest = self._cache.hash_file(path)
        LOG.debug("downloaded %s to %s (%s)", identifier, path, digest)
        return FetchResult(
            identifier=identifier,
            outcome=FetchOutcome.DOWNLOADED,
            hash=digest,
            path=path,
        )

    @staticmethod
    async def _read_body(response: httpx.Response) -> str:
        # Best-effort: el body solo sirve como diagnóstico.
        try:
            data = await response.aread()
        except httpx.HTTPError:
            return ""
        return data.decode("utf-8", errors="replace")


async def download_plugin(
    name: str,
    version: str,
    *,
    cache_dir: Path | str | None = None,
    base_url: str | None = None,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Atajo: descarga (o valida) `name@version` y devuelve solo el hash.

    Lanza `FetchError` si algo falla y `ValueError` si el identificador no es válido.
    """

    identifier = PluginIdentifier(name=name, version=version)
    cache = ArchiveCache(cache_dir) if cache_dir is not None else None
    fetcher = CatalogFetcher(cache, base_url=base_url, settings=settings, transport=transport)
    result = await fetcher.fetch(identifier)
    return result.hash
