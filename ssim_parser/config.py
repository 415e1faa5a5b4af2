"""Configuration utilities for SSIM schedule parsing runs.

This module reads environment variables (optionally from an `.env` file) and
produces an application configuration object consumed across the project.

Supported keys: `DATABASE_URL` (or `HOST`/`USER`/`PASSWORD`/`DB`/`PORT`),
`LOG_DIR`, `LOG_LEVEL`, `APP_NAME`, `SSIM_VERSION`, `SSIM_WORKERS` and
`SSIM_SOURCE_TIMEOUT`. A database is only needed when occurrences are
persisted.

Usage example:

    from ssim_parser.config import load_config

    config = load_config()
    result = parse_text(raw, version=config.schema_version, workers=config.parse_workers)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Mapping, MutableMapping, Optional, TypeVar
from urllib.parse import quote_plus

REPO_ROOT = Path(__file__).resolve().parents[1]
ENV_FILE_NAME = ".env"
DEFAULT_LOG_DIR = "logs"

T = TypeVar("T")


def base_directory() -> Path:
    """Directory that the default `.env` and relative `LOG_DIR` values resolve against.

    This is the source checkout when running from one (a `pyproject.toml` sits
    next to the package). An installed package lives in site-packages, so it
    uses the current working directory instead.
    """
    if (REPO_ROOT / "pyproject.toml").is_file():
        return REPO_ROOT
    return Path.cwd()


def _load_env_file(path: Path) -> Dict[str, str]:
    """Parse a dotenv-style file into a dictionary."""
    if not path.exists():
        return {}

    data: Dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        data[key.strip()] = value.strip().strip("\"'")
    return data


def _first_of(values: Mapping[str, str], *keys: str) -> Optional[str]:
    for key in keys:
        value = values.get(key)
        if value:
            return value
    return None


def _build_database_url_from_components(
    values: Mapping[str, str], dotenv_values: Mapping[str, str]
) -> Optional[str]:
    """Construct a PostgreSQL DSN from discrete HOST/USER/PASSWORD/DB keys.

    The short aliases (HOST, USER, ...) collide with common shell variables, so
    for those the dotenv file is consulted before the process environment.
    """

    def pick(explicit: str, *aliases: str) -> Optional[str]:
        return _first_of(values, explicit) or _first_of(dotenv_values, *aliases) or _first_of(
            values, *aliases
        )

    host = pick("DATABASE_HOST", "HOST")
    user = pick("DATABASE_USER", "USER")
    password = pick("DATABASE_PASSWORD", "PASSWORD")
    database = pick("DATABASE_NAME", "DB")
    port = pick("DATABASE_PORT", "DB_PORT", "PORT") or "5432"

    if not all([host, user, password, database]):
        return None

    return (
        f"postgresql://{quote_plus(user)}:{quote_plus(password)}"
        f"@{host.strip()}:{port}/{database.strip()}"
    )


def _parse_value(
    values: Mapping[str, str],
    key: str,
    default: T,
    cast: Callable[[str], T],
    check: Callable[[T], bool],
) -> T:
    raw = values.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{key} must be a valid {cast.__name__}, got {raw!r}") from None
    if not check(value):
        raise ValueError(f"{key} is out of range: {raw!r}")
    return value


@dataclass(frozen=True)
class AppConfig:
    """Application-level configuration values."""

    database_url: Optional[str]
    log_directory: Path
    log_level: str
    app_name: str = "ssim-parser"
    schema_version: int = 3
    parse_workers: int = 1
    source_timeout: float = 30.0


def _merge_envs(dotenv_values: Mapping[str, str], env: MutableMapping[str, str]) -> Dict[str, str]:
    """Merge dotenv values with the current environment, preferring os.environ."""
    merged = dict(dotenv_values)
    merged.update(env)  # os.environ wins
    return merged


def load_config(env_file: Optional[Path] = None, *, require_database: bool = False) -> AppConfig:
    """Load configuration values using environment defaults."""
    base_dir = base_directory()
    target_file = env_file or base_dir / ENV_FILE_NAME
    dotenv_values = _load_env_file(target_file)
    merged = _merge_envs(dotenv_values, os.environ)

    database_url = merged.get("DATABASE_URL") or _build_database_url_from_components(
        merged, dotenv_values
    )
    if not database_url and require_database:
        raise ValueError("DATABASE_URL (or HOST/USER/PASSWORD/DB combination) must be defined.")

    log_directory = Path(merged.get("LOG_DIR") or DEFAULT_LOG_DIR)
    if not log_directory.is_absolute():
        log_directory = base_dir / log_directory

    return AppConfig(
        database_url=database_url,
        log_directory=log_directory,
        log_level=merged.get("LOG_LEVEL", "INFO").upper(),
        app_name=merged.get("APP_NAME", "ssim-parser"),
        schema_version=_parse_value(merged, "SSIM_VERSION", 3, int, lambda v: v > 0),
        parse_workers=_parse_value(merged, "SSIM_WORKERS", 1, int, lambda v: v >= 1),
        source_timeout=_parse_value(merged, "SSIM_SOURCE_TIMEOUT", 30.0, float, lambda v: v > 0),
    )


__all__ = ["AppConfig", "base_directory", "load_config", "REPO_ROOT"]
