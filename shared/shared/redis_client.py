import redis.asyncio as redis

from .config import require

_client = None


def get_redis():
    global _client
    if _client is None:
        _client = redis.from_url(require("REDIS_URL"), decode_responses=True)
    return _client
