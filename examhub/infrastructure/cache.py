import json
import redis
import structlog
from typing import Optional, Any
from ..config import settings
from ..domain.entities import Role, UserProfile
from ..application.ports import IProfileCache
from .metrics import cache_hits_total, cache_misses_total

logger = structlog.get_logger(__name__)

_redis_client: Optional[redis.Redis] = None

def get_redis() -> redis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True
        )
    return _redis_client

def get_cache(key: str) -> Optional[Any]:
    """Получить значение из кэша"""
    try:
        client = get_redis()
        value = client.get(key)
        if value:
            return json.loads(value)
    except (redis.RedisError, ValueError) as e:
        # Если Redis недоступен, просто возвращаем None
        logger.warning("cache_get_failed", key=key, error=str(e))
    return None

def set_cache(key: str, value: Any, ttl: int = None) -> bool:
    """Сохранить значение в кэш"""
    try:
        client = get_redis()
        ttl = ttl or settings.CACHE_TTL
        client.setex(key, ttl, json.dumps(value, ensure_ascii=False))
        return True
    except redis.RedisError as e:
        logger.warning("cache_set_failed", key=key, error=str(e))
        return False

def delete_cache(key: str) -> bool:
    """Удалить значение из кэша"""
    try:
        client = get_redis()
        client.delete(key)
        return True
    except redis.RedisError as e:
        logger.warning("cache_delete_failed", key=key, error=str(e))
        return False


class ProfileCache(IProfileCache):
    """Redis-backed snapshot of user profiles, keyed by user id."""

    @staticmethod
    def key(user_id: int) -> str:
        return f"user:{user_id}:profile"

    def get(self, user_id: int) -> UserProfile | None:
        cached = get_cache(self.key(user_id))
        if not cached:
            cache_misses_total.inc()
            return None
        try:
            profile = UserProfile(
                id=cached["id"],
                email=cached["email"],
                name=cached["name"],
                role=Role.parse(cached["role"]),
            )
        except (KeyError, TypeError, ValueError):
            delete_cache(self.key(user_id))
            cache_misses_total.inc()
            return None
        cache_hits_total.inc()
        return profile

    def put(self, profile: UserProfile) -> None:
        set_cache(self.key(profile.id), profile.public())

    def invalidate(self, user_id: int) -> None:
        delete_cache(self.key(user_id))
