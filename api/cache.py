import hashlib
import json
import logging
import os
from typing import Optional

import redis

from auditor.keywords import parse_keywords

logger = logging.getLogger(__name__)

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379")
CACHE_TTL = int(os.getenv("CACHE_TTL_SECONDS", "3600"))  # 1 hour default

# module-level client; None if Redis is unavailable (cache degrades gracefully)
_client: Optional[redis.Redis] = None


def get_client() -> Optional[redis.Redis]:
    global _client
    if _client is None:
        try:
            _client = redis.from_url(REDIS_URL, decode_responses=True, socket_connect_timeout=2)
            _client.ping()
        except redis.RedisError as exc:
            logger.warning("Redis unavailable, caching disabled: %s", exc)
            _client = None
    return _client


def cache_key(url: str, keywords=None) -> str:
    # keyword order and case don't change the analysis, so they don't change the key
    material = url + "|" + ",".join(sorted(parse_keywords(keywords)))
    digest = hashlib.sha256(material.encode()).hexdigest()[:16]
    return f"audit:{digest}"


def get_cached(url: str, keywords=None) -> Optional[dict]:
    client = get_client()
    if client is None:
        return None
    try:
        raw = client.get(cache_key(url, keywords))
        return json.loads(raw) if raw else None
    except (redis.RedisError, ValueError) as exc:
        logger.warning("Cache read error: %s", exc)
        return None


def set_cached(url: str, data: dict, keywords=None, ttl: int = CACHE_TTL) -> None:
    client = get_client()
    if client is None:
        return
    try:
        client.setex(cache_key(url, keywords), ttl, json.dumps(data))
    except (redis.RedisError, TypeError) as exc:
        logger.warning("Cache write error: %s", exc)


def is_cache_healthy() -> bool:
    client = get_client()
    if client is None:
        return False
    try:
        client.ping()
        return True
    except redis.RedisError:
        return False
