from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_CACHE_TTL_SECONDS = 10 * 60
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class CatalogConfig:
    """Runtime settings for the catalog, read from the environment."""

    gcp_project: Optional[str] = None
    recipes_collection: str = "recipes"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 0
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    log_level: str = "INFO"
    secret_key: str = "development-secret-change-me"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CatalogConfig":
        """Build a configuration from ``environ`` (defaults to ``os.environ``)."""

        env = os.environ if environ is None else environ
        ttl = _int(env, "CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS)
        if ttl <= 0:
            raise ValueError("CACHE_TTL_SECONDS must be a positive integer.")

        return cls(
            gcp_project=env.get("GCP_PROJECT") or None,
            recipes_collection=env.get("RECIPES_COLLECTION", "recipes"),
            redis_host=env.get("REDIS_HOST", "localhost"),
            redis_port=_int(env, "REDIS_PORT", 6379),
            redis_password=env.get("REDIS_PASSWORD") or None,
            redis_db=_int(env, "REDIS_DB", 0),
            cache_ttl_seconds=ttl,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            secret_key=env.get("FLASK_SECRET_KEY", "development-secret-change-me"),
        )


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


__all__ = ["CatalogConfig", "DEFAULT_CACHE_TTL_SECONDS", "configure_logging"]
