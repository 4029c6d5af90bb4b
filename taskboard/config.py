"""Settings loaded from environment variables (plus an optional .env file).

Variables use the ``TASKBOARD_`` prefix. Values that fail to parse fall back
to their defaults.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "TASKBOARD"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(*names: str, default: int) -> int:
    raw = _first_env(*names)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path | None) -> Path | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_log_level(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, fixed at startup."""

    data_dir: Path = Path("data")
    host: str = "127.0.0.1"
    port: int = 3000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    client_dist: Path | None = Path("client") / "dist"
    log_level: int = logging.INFO

    @property
    def tasks_file(self) -> Path:
        return self.data_dir / "tasks.json"


def load_settings(*, dotenv: bool = True) -> Settings:
    """Build :class:`Settings` from the environment.

    With ``dotenv`` set, a ``.env`` file in the working directory is loaded
    first; real environment variables take precedence over it.
    """
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True), override=False)

    defaults = Settings()
    return Settings(
        data_dir=_env_path(_k("DATA_DIR"), defaults.data_dir),
        host=_first_env(_k("HOST"), default=defaults.host) or defaults.host,
        port=_env_int(_k("PORT"), "PORT", default=defaults.port),
        cors_origins=_env_list(_k("CORS_ORIGINS"), defaults.cors_origins),
        client_dist=_env_path(_k("CLIENT_DIST"), defaults.client_dist),
        log_level=_env_log_level(_k("LOG_LEVEL"), defaults.log_level),
    )
