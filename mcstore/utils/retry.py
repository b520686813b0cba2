# mcstore/utils/retry.py
from tenacity import (
    retry,
    retry_if_exception_type,
    retry_if_result,
    stop_after_delay,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)
import redis


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )


def lock_wait(timeout: float):
    """
    Ponawia proby wziecia locka (funkcja zwraca bool) az do timeout sekund.
    Po czasie zwraca False zamiast rzucac RetryError.
    """
    return retry(
        stop=stop_after_delay(timeout),
        wait=wait_random(min=0.02, max=0.1),
        retry=retry_if_result(lambda acquired: not acquired),
        retry_error_callback=lambda state: False,
    )
