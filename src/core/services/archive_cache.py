"""Caché local de archivos de plugins.

Layout en disco: `<root>/<name segments...>/<version>.zip`.

El hash nunca se guarda aparte: se recalcula desde los bytes actuales cada vez
que se necesita, así no hay forma de que hash y contenido diverjan.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from core.domain.errors import FetchError, FetchStage
from core.domain.models import PluginIdentifier

LOG = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".zip"
_CHUNK_SIZE = 64 * 1024


def compute_hash(path: Path) -> str:
    """sha-256 (hex, minúsculas) del archivo completo, leído por bloques."""

    digest = hashlib.sha256()
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


class ArchiveCache:
    """Raíz de caché explícita (nunca un global) para poder aislarla en tests."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def archive_path(self, identifier: PluginIdentifier) -> Path:
        return self._root.joinpath(*identifier.name_segments, identifier.version + ARCHIVE_SUFFIX)

    def hash_file(self, path: Path) -> str:
        try:
            return compute_hash(path)
        except OSError as exc:
            raise FetchError(FetchStage.HASH, f"failed to compute hash: {exc}") from exc

    def local_hash(self, identifier: PluginIdentifier) -> str | None:
        """Hash de la copia local, o `None` si todavía no existe.

        Cualquier error de `stat` distinto de "no existe" es fatal.
        """

        path = self.archive_path(identifier)
        try:
            path.stat()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise FetchError(FetchStage.STAT, f"failed to read archive {path}: {exc}") from exc

        digest = self.hash_file(path)
        LOG.debug("local archive %s has hash %s", path, digest)
        return digest
