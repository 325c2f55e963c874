from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'json' (default) or 'memory'
    - DATA_FILE: path to the JSON store. Default './data/countdowns.json'
      ('/tmp/countdowns.json' when VERCEL=1, the deploy filesystem being read-only)
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - FONT_DIR: optional directory holding '<Family>-Bold.ttf' / '<Family>-Regular.ttf' files
    - PREFERRED_FONT_FAMILY: font family tried first when rendering (default 'DejaVuSans')
    - LOG_LEVEL: logging level name (default 'INFO')
    - HOST / PORT: bind address when the app is started directly (default 0.0.0.0:3000)
    """

    persistence_backend: str
    data_file: str
    cors_allow_origins: List[str]
    font_dir: Optional[str]
    preferred_font_family: str
    log_level: str
    host: str
    port: int


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        # Star will be handled in main via allow_origins=["*"]
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "json").strip().lower()
    if backend not in {"memory", "json"}:
        # Fallback to the file store if unsupported
        backend = "json"

    default_data_file = "/tmp/countdowns.json" if os.getenv("VERCEL") == "1" else "./data/countdowns.json"
    data_file = _get_env("DATA_FILE", default_data_file).strip()
    origins = _parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*"))

    font_dir = os.getenv("FONT_DIR") or None
    log_level = _get_env("LOG_LEVEL", "INFO").strip().upper()
    if log_level not in LOG_LEVELS:
        log_level = "INFO"

    return Settings(
        persistence_backend=backend,
        data_file=data_file,
        cors_allow_origins=origins,
        font_dir=font_dir.strip() if font_dir else None,
        preferred_font_family=_get_env("PREFERRED_FONT_FAMILY", "DejaVuSans").strip(),
        log_level=log_level,
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_int(_get_env("PORT", "3000"), 3000),
    )
