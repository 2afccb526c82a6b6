"""
Pytest fixtures for plugin-fetcher tests.
"""
from __future__ import annotations

import hashlib

import httpx
import pytest

from core.config import AppSettings
from core.domain.models import PluginIdentifier

BASE_URL = "https://plugins.example.test/public/"

# Zip-looking payload; only the bytes matter to the fetcher.
ZIP_BYTES = b"PK\x03\x04" + b"\x00" * 26 + b"PK\x05\x06" + b"\x00" * 18


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class FakeCatalog:
    """Stands in for the catalog service; records every request it sees."""

    def __init__(self, *responses: httpx.Response) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        template = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        # Fresh response per call; the retrying transport closes the ones it discards.
        return httpx.Response(
            template.status_code, headers=template.headers, content=template.content
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    """Isolated settings: no .env files, temp cache, no real backoff waits."""
    return AppSettings(
        _env_file=None,
        cache_dir=tmp_path / "cache",
        catalog_base_url=BASE_URL,
        http_max_retries=2,
        http_retry_wait_min_seconds=0,
        http_retry_wait_max_seconds=0,
    )


@pytest.fixture
def identifier() -> PluginIdentifier:
    return PluginIdentifier(name="acme/tool", version="1.0.0")
