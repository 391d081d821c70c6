import logging
import time

from .redis_client import get_redis

logger = logging.getLogger(__name__)

CLOSED = "CLOSED"
OPEN = "OPEN"
HALF_OPEN = "HALF_OPEN"


class CircuitBreakerOpen(Exception):
    pass


class CircuitBreaker:
    """
    Redis-backed circuit breaker, shared by every replica of a service.

    CLOSED counts failures inside a 60s window; reaching the threshold
    opens the breaker. OPEN rejects calls until reset_timeout_seconds
    have passed, then HALF_OPEN lets probes through: one success closes
    it, one failure opens it again.
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        reset_timeout_seconds: int = 15,
        redis=None,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout_seconds = reset_timeout_seconds
        self._redis = redis

    @property
    def redis(self):
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    def _key(self, suffix: str) -> str:
        return f"cb:{self.name}:{suffix}"

    async def state(self) -> str:
        return await self.redis.get(self._key("state")) or CLOSED

    async def allow_request(self) -> None:
        state = await self.state()

        if state != OPEN:
            return

        opened_at = await self.redis.get(self._key("opened_at"))
        if not opened_at:
            await self.close()
            return

        if time.time() - float(opened_at) >= self.reset_timeout_seconds:
            await self.redis.set(self._key("state"), HALF_OPEN)
            return

        raise CircuitBreakerOpen(f"Circuit breaker OPEN for {self.name}")

    async def record_success(self) -> None:
        if await self.state() != CLOSED or await self.redis.exists(self._key("failures")):
            await self.close()

    async def record_failure(self) -> None:
        if await self.state() == HALF_OPEN:
            await self.open()
            return

        failures = await self.redis.incr(self._key("failures"))
        if failures == 1:
            await self.redis.expire(self._key("failures"), 60)

        if failures >= self.failure_threshold:
            await self.open()

    async def open(self) -> None:
        logger.warning("circuit breaker %s opened", self.name)
        pipe = self.redis.pipeline()
        pipe.set(self._key("state"), OPEN)
        pipe.set(self._key("opened_at"), str(time.time()))
        pipe.expire(self._key("state"), self.reset_timeout_seconds + 30)
        pipe.expire(self._key("opened_at"), self.reset_timeout_seconds + 30)
        await pipe.execute()

    async def close(self) -> None:
        pipe = self.redis.pipeline()
        pipe.set(self._key("state"), CLOSED)
        pipe.delete(self._key("failures"))
        pipe.delete(self._key("opened_at"))
        pipe.expire(self._key("state"), 3600)
        await pipe.execute()

    async def status(self) -> dict:
        failures = await self.redis.get(self._key("failures"))
        return {
            "name": self.name,
            "state": await self.state(),
            "failures": int(failures or 0),
        }
