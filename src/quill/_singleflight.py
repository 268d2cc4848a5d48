"""Thread single-flight helper.

Used to coordinate concurrent requests for the same key so only one thread
performs the work, while others wait on the same Future.
"""

from __future__ import annotations

from concurrent.futures import Future
import threading
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

K = TypeVar("K")
T = TypeVar("T")


def singleflight_cached(
    key: K,
    *,
    lock: threading.Lock,
    inflight: dict[K, Future[T]],
    cache_get: Callable[[K], T | None],
    cache_set: Callable[[K, T], None],
    work: Callable[[], T],
) -> T:
    """Return cached value for key, or compute it once with single-flight.

    - If cached, returns immediately.
    - If inflight, waits on the existing Future.
    - Otherwise, creates a Future and runs *work* as the single creator.

    Failures are not cached: waiters see the creator's exception, and the next
    caller starts a fresh attempt.
    """
    with lock:
        cached = cache_get(key)
        if cached is not None:
            return cached

        fut = inflight.get(key)
        if fut is None:
            fut = Future()
            inflight[key] = fut
            creator = True
        else:
            creator = False

    if not creator:
        return fut.result()

    try:
        value = work()
    except BaseException as e:
        with lock:
            _drop_inflight(inflight, key, fut)
        fut.set_exception(e)
        raise
    with lock:
        cache_set(key, value)
        _drop_inflight(inflight, key, fut)
    fut.set_result(value)
    return value


def _drop_inflight(inflight: dict[K, Future[T]], key: K, fut: Future[T]) -> None:
    # The owner may have reset `inflight` while the work ran; leave a newer
    # Future for the same key alone.
    if inflight.get(key) is fut:
        del inflight[key]
