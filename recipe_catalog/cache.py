"""Redis backed cache used in front of the recipe store."""

from __future__ import annotations

import logging
from typing import Optional

import redis

from .config import CatalogConfig
from .errors import BackendUnavailable
from .storage import RecipeCache

logger = logging.getLogger(__name__)

BACKEND_NAME = "Redis"


class RedisRecipeCache(RecipeCache):
    """Thin adapter over a shared :class:`redis.Redis` connection pool.

    Every :class:`redis.RedisError` is re-raised as
    :class:`BackendUnavailable`. A missing key is not an error and comes back
    as ``None`` from :meth:`get`.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def connect(
        cls,
        *,
        host: str = "localhost",
        port: int = 6379,
        password: Optional[str] = None,
        db: int = 0,
    ) -> "RedisRecipeCache":
        client = redis.Redis(
            host=host,
            port=port,
            password=password or None,
            db=db,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            health_check_interval=30,
        )
        cache = cls(client)
        cache.ping()
        logger.info(f"Redis is up and running at {host}:{port}/{db}")
        return cache

    @classmethod
    def from_config(cls, config: CatalogConfig) -> "RedisRecipeCache":
        return cls.connect(
            host=config.redis_host,
            port=config.redis_port,
            password=config.redis_password,
            db=config.redis_db,
        )

    def ping(self) -> None:
        try:
            self._client.ping()
        except redis.RedisError as exc:
            raise BackendUnavailable(BACKEND_NAME, str(exc)) from exc

    def get(self, key: str) -> Optional[str]:
        try:
            return self._client.get(key)
        except redis.RedisError as exc:
            raise BackendUnavailable(BACKEND_NAME, str(exc)) from exc

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            self._client.set(key, value, ex=ttl_seconds)
        except redis.RedisError as exc:
            raise BackendUnavailable(BACKEND_NAME, str(exc)) from exc

    def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return int(self._client.delete(*keys))
        except redis.RedisError as exc:
            raise BackendUnavailable(BACKEND_NAME, str(exc)) from exc

    def close(self) -> None:
        self._client.close()


__all__ = ["RedisRecipeCache"]
