"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers, retries y logging para todas las llamadas al catálogo.
- Facilita testeo: se puede inyectar un `httpx.MockTransport` debajo de los reintentos.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from core.config import AppSettings

LOG = logging.getLogger(__name__)

# 501 (Not Implemented) no se arregla reintentando.
_RETRY_STATUSES = frozenset({429} | {code for code in range(500, 600) if code != 501})
_RETRY_AFTER_STATUSES = frozenset({429, 503})


def _parse_retry_after(value: str | None) -> float | None:
    if not value:
        return None
    try:
        seconds = int(value.strip())
    except ValueError:
        return None
    return float(seconds) if seconds >= 0 else None


class RetryingTransport(httpx.AsyncBaseTransport):
    """Transporte que reintenta fallos transitorios con backoff exponencial.

    Reintenta errores de transporte y respuestas 429/5xx (menos 501). Agotados
    los reintentos devuelve la última respuesta tal cual, o relanza el último
    error de transporte; quien llama decide qué hacer con un 503 final.
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport,
        *,
        max_retries: int = 4,
        wait_min: float = 1.0,
        wait_max: float = 30.0,
    ) -> None:
        self._transport = transport
        self._max_retries = max_retries
        self._wait_min = wait_min
        self._wait_max = wait_max

    def backoff(self, attempt: int, response: httpx.Response | None = None) -> float:
        if response is not None and response.status_code in _RETRY_AFTER_STATUSES:
            retry_after = _parse_retry_after(response.headers.get("Retry-After"))
            if retry_after is not None:
                return min(retry_after, self._wait_max)
        return min(self._wait_max, self._wait_min * (2**attempt))

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        attempt = 0
        while True:
            try:
                response = await self._transport.handle_async_request(request)
            except httpx.TransportError as exc:
                if attempt >= self._max_retries:
                    raise
                delay = self.backoff(attempt)
                LOG.warning(
                    "%s %s failed (%s), retrying in %.1fs (%d left)",
                    request.method,
                    request.url,
                    exc,
                    delay,
                    self._max_retries - attempt,
                )
            else:
                if response.status_code not in _RETRY_STATUSES or attempt >= self._max_retries:
                    return response
                delay = self.backoff(attempt, response)
                await response.aclose()
                LOG.warning(
                    "%s %s returned %d, retrying in %.1fs (%d left)",
                    request.method,
                    request.url,
                    response.status_code,
                    delay,
                    self._max_retries - attempt,
                )
            attempt += 1
            await asyncio.sleep(delay)

    async def aclose(self) -> None:
        await self._transport.aclose()


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros y reintentos.

    Por qué un builder:
    - Centraliza timeouts/headers/reintentos para que todas las llamadas se comporten igual.
    - `transport` permite sustituir la red real (tests, proxies) sin perder los reintentos.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/zip, application/octet-stream;q=0.9, */*;q=0.8",
    }
    if extra_headers:
        headers.update(extra_headers)
    retrying = RetryingTransport(
        transport or httpx.AsyncHTTPTransport(),
        max_retries=settings.http_max_retries,
        wait_min=settings.http_retry_wait_min_seconds,
        wait_max=settings.http_retry_wait_max_seconds,
    )
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=retrying,
    )
