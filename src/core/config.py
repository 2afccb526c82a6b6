"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar los adaptadores.
- El fetcher recibe valores explícitos (cache root, base URL); estos settings
  solo aportan los defaults.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR_NAME = "plugin-fetcher"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / ".config" / APP_DIR_NAME


def get_user_cache_dir() -> Path:
    """Directorio de caché por usuario.

    Mismas reglas que `get_user_config_dir`, pero con las ubicaciones de
    caché de cada plataforma (LOCALAPPDATA, ~/Library/Caches, XDG_CACHE_HOME).
    """

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("LOCALAPPDATA", str(Path.home())))
        return base / APP_DIR_NAME / "cache"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches" / APP_DIR_NAME

    xdg = os.environ.get("XDG_CACHE_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / ".cache" / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _default_cache_dir() -> Path:
    return get_user_cache_dir() / "archives"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para todos los adaptadores.
    """

    model_config = SettingsConfigDict(
        env_prefix="PLUGIN_FETCHER_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    catalog_base_url: str = Field(
        default="https://plugins.traefik.io/public/",
        min_length=8,
        description="URL base del catálogo de plugins.",
    )
    cache_dir: Path = Field(
        default_factory=_default_cache_dir,
        description="Raíz local donde se guardan los archivos <name>/<version>.zip.",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    http_max_retries: int = Field(
        default=4,
        ge=0,
        le=10,
        description="Reintentos máximos del transporte ante fallos transitorios (red, 429, 5xx).",
    )
    http_retry_wait_min_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Espera mínima entre reintentos (segundos).",
    )
    http_retry_wait_max_seconds: float = Field(
        default=30.0,
        ge=0,
        description="Espera máxima entre reintentos (segundos).",
    )
    user_agent: str = Field(
        default="plugin-fetcher/0.1",
        min_length=1,
        description="User-Agent para las peticiones al catálogo.",
    )

    log_level: str = Field(
        default="INFO",
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR).",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value!r}")
        return level

    @model_validator(mode="after")
    def _check_retry_window(self) -> "AppSettings":
        if self.http_retry_wait_min_seconds > self.http_retry_wait_max_seconds:
            raise ValueError(
                "http_retry_wait_min_seconds must not exceed http_retry_wait_max_seconds"
            )
        return self
