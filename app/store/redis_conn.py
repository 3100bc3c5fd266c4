from redis import Redis
from app.settings import settings


def get_redis() -> Redis:
    # One round-trip per store call; fail fast instead of hanging the request
    return Redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT_SEC,
    )
