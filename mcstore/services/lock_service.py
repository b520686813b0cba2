# mcstore/services/lock_service.py
import redis

from mcstore.utils import settings
from mcstore.utils.logging import get_logger
from mcstore.utils.retry import redis_retry

logger = get_logger(__name__)

#LUA porownaj i usun, atomowo
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    -blokada per klucz (np. cart:{uid}:{product_id})
    -zwalnianie tylko przez wlasciciela tokena
    -TTL zeby martwy proces nie trzymal blokady
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or settings.REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def acquire(self, key: str, token: str, ttl: int) -> bool:
        logger.info(f"Acquire lock {key}")
        #SET cart:uid:1:lock "token" NX EX 10
        return bool(self.redis.set(name=f"{key}:lock", value=token, nx=True, ex=ttl))

    @redis_retry()
    def release(self, key: str, token: str) -> bool:
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, f"{key}:lock", token)
        return bool(res)
