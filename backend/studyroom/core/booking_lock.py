"""
Keyed mutual-exclusion scope for the booking critical section.

A booking holds one key for its (room, date, hour) slot and one key per
participating student and date, so the conflict check, the quota check and
the insert cannot interleave with another booking touching the same slot or
student. Keys are always acquired in sorted order.

In-process locks serialize request threads of one worker. When ``redis_url``
is configured the same keys are also taken in Redis so that several workers
serialize with each other; if Redis is unreachable the scope degrades to the
in-process locks and the database unique constraint.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date
import logging
import threading
import time
from typing import Iterable, Iterator, List, Optional
import weakref

from redis import Redis
import ulid

from studyroom.monitoring.prometheus_metrics import prometheus_metrics
from studyroom.core.config import settings
from studyroom.core.exceptions import BookingBusyException

logger = logging.getLogger(__name__)

_LOCAL_LOCKS: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()
_LOCAL_LOCKS_GUARD = threading.Lock()

_SYNC_REDIS: Optional[Redis] = None
_SYNC_REDIS_LOCK = threading.Lock()

_REDIS_POLL_INTERVAL_S = 0.05

# Delete the key only if this scope still owns it
_RELEASE_SCRIPT = """
if redis.call('get', KEYS[1]) == ARGV[1] then
    return redis.call('del', KEYS[1])
end
return 0
"""


def slot_key(room_id: str, day: date, start_hour: int) -> str:
    return f"slot:{room_id}:{day.isoformat()}:{start_hour}"


def quota_key(day: date, name: str, class_identifier: str) -> str:
    return f"quota:{day.isoformat()}:{name}:{class_identifier}"


def _namespaced_key(key: str) -> str:
    return f"studyroom:lock:{key}"


def _local_lock(key: str) -> threading.Lock:
    with _LOCAL_LOCKS_GUARD:
        lock = _LOCAL_LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _LOCAL_LOCKS[key] = lock
        return lock


def _get_sync_redis() -> Optional[Redis]:
    global _SYNC_REDIS
    if not settings.redis_url:
        return None
    if _SYNC_REDIS is not None:
        return _SYNC_REDIS
    with _SYNC_REDIS_LOCK:
        if _SYNC_REDIS is not None:
            return _SYNC_REDIS
        try:
            client = Redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            client.ping()
        except Exception as exc:
            logger.warning("booking_lock_sync_redis_unavailable: %s", exc)
            return None
        _SYNC_REDIS = client
        return _SYNC_REDIS


def _acquire_redis_key(client: Redis, key: str, token: str, ttl_s: int, deadline: float) -> bool:
    while True:
        if client.set(_namespaced_key(key), token, nx=True, ex=ttl_s):
            return True
        if time.monotonic() >= deadline:
            return False
        time.sleep(_REDIS_POLL_INTERVAL_S)


def _release_redis_key(client: Redis, key: str, token: str) -> None:
    try:
        client.eval(_RELEASE_SCRIPT, 1, _namespaced_key(key), token)
        prometheus_metrics.record_booking_lock("release", "success")
    except Exception as exc:
        prometheus_metrics.record_booking_lock("release", "error")
        logger.warning(
            "booking_lock_redis_release_failed",
            extra={"key": key, "error": str(exc), "error_type": type(exc).__name__},
        )


@contextmanager
def booking_scope(
    keys: Iterable[str],
    timeout_s: Optional[float] = None,
    ttl_s: Optional[int] = None,
) -> Iterator[List[str]]:
    """
    Hold every key in ``keys`` for the duration of the block.

    Raises:
        BookingBusyException: if the keys are not all acquired within ``timeout_s``
    """
    ordered = sorted(set(keys))
    timeout = settings.booking_lock_timeout_seconds if timeout_s is None else timeout_s
    ttl = settings.booking_lock_ttl_seconds if ttl_s is None else ttl_s
    deadline = time.monotonic() + timeout

    held_local: List[threading.Lock] = []
    held_redis: List[str] = []
    client: Optional[Redis] = None
    token = str(ulid.ULID())

    try:
        for key in ordered:
            lock = _local_lock(key)
            remaining = max(deadline - time.monotonic(), 0.0)
            if not lock.acquire(timeout=remaining):
                prometheus_metrics.record_booking_lock("acquire", "blocked")
                logger.warning("booking_lock_timeout", extra={"key": key, "scope": ordered})
                raise BookingBusyException(ordered)
            held_local.append(lock)

        client = _get_sync_redis()
        if client is not None:
            try:
                for key in ordered:
                    if not _acquire_redis_key(client, key, token, ttl, deadline):
                        prometheus_metrics.record_booking_lock("acquire", "blocked")
                        logger.warning("booking_lock_timeout", extra={"key": key, "scope": ordered})
                        raise BookingBusyException(ordered)
                    held_redis.append(key)
            except BookingBusyException:
                raise
            except Exception as exc:
                prometheus_metrics.record_booking_lock("acquire", "redis_unavailable")
                logger.warning(
                    "booking_lock_redis_acquire_failed",
                    extra={"scope": ordered, "error": str(exc), "error_type": type(exc).__name__},
                )

        prometheus_metrics.record_booking_lock("acquire", "success")
        yield ordered
    finally:
        if client is not None:
            for key in reversed(held_redis):
                _release_redis_key(client, key, token)
        for lock in reversed(held_local):
            lock.release()
