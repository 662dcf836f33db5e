"""
The MIT License (MIT)

Copyright (c) 2015-present Rapptz

Permission is hereby granted, free of charge, to any person obtaining a
copy of this software and associated documentation files (the "Software"),
to deal in the Software without restriction, including without limitation
the rights to use, copy, modify, merge, publish, distribute, sublicense,
and/or sell copies of the Software, and to permit persons to whom the
Software is furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS
OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER
DEALINGS IN THE SOFTWARE.
"""

from __future__ import annotations

import asyncio
from collections import deque
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Deque, Dict, List, Optional

from .errors import RateLimited
from . import utils

if TYPE_CHECKING:
    from multidict import CIMultiDictProxy

    from .http import Route

    SendFunc = Callable[['QueuedRequest', Optional['BucketQueue']], Awaitable[Any]]

__all__ = (
    'Bucket',
    'BucketStore',
    'GlobalLock',
    'QueuedRequest',
    'BucketQueue',
    'Ratelimiter',
)

_log = logging.getLogger(__name__)


def _now() -> float:
    return asyncio.get_running_loop().time()


class RetryRequest(Exception):
    """Raised by a single attempt when the request should be sent again.

    ``error`` is what the caller receives once no attempts are left.
    """

    def __init__(self, delay: float, error: BaseException, *, is_global: bool = False) -> None:
        self.delay: float = delay
        self.error: BaseException = error
        self.is_global: bool = is_global
        super().__init__(f'retrying in {delay:.2f} seconds')


class Bucket:
    """Represents the known state of a Discord rate limit bucket.

    ``expires`` is a timestamp on the event loop clock. A bucket with
    ``remaining == 0`` does not allow any request through until it expires.
    """

    __slots__ = ('key', 'limit', 'remaining', 'reset_after', 'expires')

    def __init__(self, key: str) -> None:
        self.key: str = key
        self.limit: int = 1
        self.remaining: int = self.limit
        self.reset_after: float = 0.0
        self.expires: Optional[float] = None

    def __repr__(self) -> str:
        return f'<Bucket key={self.key!r} limit={self.limit} remaining={self.remaining} expires={self.expires}>'

    def reset(self) -> None:
        self.remaining = self.limit
        self.expires = None
        self.reset_after = 0.0

    def is_expired(self, now: float) -> bool:
        return self.expires is not None and now >= self.expires

    def consume(self) -> None:
        self.remaining = max(self.remaining - 1, 0)


class BucketStore:
    """Holds the rate limit state of every bucket seen by a client.

    Buckets that were never seen are absent. Those are assumed to have
    capacity so that the first request of a route always goes out.
    """

    def __init__(self) -> None:
        self._buckets: Dict[str, Bucket] = {}

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, key: str) -> bool:
        return key in self._buckets

    def get(self, key: str) -> Optional[Bucket]:
        return self._buckets.get(key)

    def update(self, key: str, limit: int, remaining: int, reset_after: float) -> Bucket:
        # Plain assignments, applying the same headers twice gives the same state
        try:
            bucket = self._buckets[key]
        except KeyError:
            self._buckets[key] = bucket = Bucket(key)

        bucket.limit = limit
        bucket.remaining = max(remaining, 0)
        bucket.reset_after = reset_after
        bucket.expires = _now() + reset_after
        return bucket

    def discard(self, key: str) -> None:
        self._buckets.pop(key, None)


class GlobalLock:
    """A client wide lock set when Discord reports a global rate limit.

    The lock releases itself once the event loop clock passes the resume time.
    """

    def __init__(self) -> None:
        self._resume_at: Optional[float] = None

    def __repr__(self) -> str:
        return f'<GlobalLock resume_at={self._resume_at}>'

    @property
    def resume_at(self) -> Optional[float]:
        return self._resume_at

    def is_locked(self) -> bool:
        return self._resume_at is not None and _now() < self._resume_at

    def lock_until(self, when: float) -> None:
        if self._resume_at is None or when > self._resume_at:
            self._resume_at = when

    def lock_for(self, seconds: float) -> None:
        self.lock_until(_now() + seconds)

    async def wait(self) -> None:
        while self._resume_at is not None:
            delay = self._resume_at - _now()
            if delay <= 0:
                _log.debug('Global rate limit is now over.')
                self._resume_at = None
                break
            await asyncio.sleep(delay)


class QueuedRequest:
    """A request waiting in, or being executed by, a :class:`BucketQueue`.

    The result future is resolved or rejected exactly once. When the caller
    stops waiting the future is cancelled and the request is skipped.
    """

    __slots__ = ('route', 'send', 'future', 'attempt', 'retry_limit')

    def __init__(self, route: Route, send: SendFunc, *, retry_limit: int) -> None:
        self.route: Route = route
        self.send: SendFunc = send
        self.future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self.attempt: int = 0
        self.retry_limit: int = max(retry_limit, 1)

    def __repr__(self) -> str:
        return f'<QueuedRequest route={self.route.key!r} attempt={self.attempt} retry_limit={self.retry_limit}>'

    def done(self) -> bool:
        return self.future.done()

    def succeed(self, result: Any) -> None:
        if not self.future.done():
            self.future.set_result(result)

    def fail(self, exc: BaseException) -> None:
        if not self.future.done():
            self.future.set_exception(exc)

    def retry(self, exc: RetryRequest, global_lock: GlobalLock) -> Optional[float]:
        """Records a failed attempt.

        Returns the number of seconds to sleep before the next attempt, or
        ``None`` when every attempt has been used up.
        """
        self.attempt += 1
        # A global 429 blocks every bucket even when this request gives up
        if exc.is_global:
            global_lock.lock_for(exc.delay)

        if self.attempt >= self.retry_limit:
            _log.debug('%s %s has used all of its %s attempts.', self.route.method, self.route.url, self.retry_limit)
            return None

        return 0.0 if exc.is_global else exc.delay


class BucketQueue:
    """The FIFO queue of requests sharing a rate limit bucket.

    A single worker task drains the queue, one request at a time, so the
    bucket state has exactly one writer.
    """

    def __init__(
        self,
        key: str,
        store: BucketStore,
        global_lock: GlobalLock,
        *,
        max_ratelimit_timeout: Optional[float] = None,
    ) -> None:
        self.key: str = key
        self._store: BucketStore = store
        self._global: GlobalLock = global_lock
        self._max_ratelimit_timeout: Optional[float] = max_ratelimit_timeout
        self._pending: Deque[QueuedRequest] = deque()
        self._worker: Optional[asyncio.Task[None]] = None

    def __repr__(self) -> str:
        return f'<BucketQueue key={self.key!r} pending={len(self._pending)} running={self.is_running()}>'

    def __len__(self) -> int:
        return len(self._pending)

    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def is_inactive(self) -> bool:
        return not self._pending and not self.is_running()

    def enqueue(self, request: QueuedRequest) -> None:
        self._pending.append(request)
        if not self.is_running():
            self._worker = asyncio.create_task(self._run(), name=f'snowtransfer: bucket {self.key}')

    def cancel(self) -> None:
        if self._worker is not None:
            self._worker.cancel()
        while self._pending:
            self._pending.popleft().future.cancel()

    async def _wait_for_capacity(self) -> None:
        while True:
            bucket = self._store.get(self.key)
            if bucket is None:
                return

            now = _now()
            if bucket.is_expired(now) or bucket.expires is None:
                bucket.reset()
                return

            if bucket.remaining > 0:
                return

            delay = bucket.expires - now
            if self._max_ratelimit_timeout is not None and delay > self._max_ratelimit_timeout:
                raise RateLimited(delay)

            _log.debug('Rate limit bucket %s is exhausted. Sleeping for %.2f seconds.', self.key, delay)
            await asyncio.sleep(delay)

    async def _run(self) -> None:
        pending = self._pending
        while pending:
            request = pending[0]
            if request.done():
                pending.popleft()
                continue

            await self._global.wait()
            try:
                await self._wait_for_capacity()
            except RateLimited as exc:
                pending.popleft()
                request.fail(exc)
                continue

            # The caller may have given up while this request was sleeping
            if request.done():
                pending.popleft()
                continue

            if self._global.is_locked():
                continue

            bucket = self._store.get(self.key)
            if bucket is not None:
                bucket.consume()

            try:
                result = await request.send(request, self)
            except RetryRequest as exc:
                delay = request.retry(exc, self._global)
                if delay is None:
                    pending.popleft()
                    request.fail(exc.error)
                elif delay:
                    await asyncio.sleep(delay)
            except Exception as exc:
                pending.popleft()
                request.fail(exc)
            else:
                pending.popleft()
                request.succeed(result)


class Ratelimiter:
    """Routes requests to their bucket queue.

    Queues are keyed by ``route key + major parameters`` until Discord reports
    the bucket hash of a route, after which ``bucket hash + major parameters``
    also points to the same queue.
    """

    def __init__(
        self,
        store: Optional[BucketStore] = None,
        *,
        max_ratelimit_timeout: Optional[float] = None,
        use_clock: bool = False,
    ) -> None:
        self.store: BucketStore = store if store is not None else BucketStore()
        self.global_lock: GlobalLock = GlobalLock()
        self.max_ratelimit_timeout: Optional[float] = max_ratelimit_timeout
        self.use_clock: bool = use_clock
        # Route key -> Bucket hash
        self._bucket_hashes: Dict[str, str] = {}
        # Bucket hash + major parameters -> queue
        # or
        # Route key + major parameters -> queue
        # When this reaches 256 elements, idle queues are evicted
        self._queues: Dict[str, BucketQueue] = {}

    def __len__(self) -> int:
        return len(self._queues)

    def resolve(self, route: Route) -> str:
        try:
            bucket_hash = self._bucket_hashes[route.key]
        except KeyError:
            return route.bucket
        else:
            return f'{bucket_hash}:{route.major_parameters}'

    def _try_clear_inactive(self) -> None:
        if len(self._queues) < 256:
            return

        keys = [key for key, queue in self._queues.items() if queue.is_inactive()]
        for key in keys:
            queue = self._queues.pop(key)
            if key == queue.key:
                self.store.discard(key)

    def get_queue(self, route: Route) -> BucketQueue:
        key = self.resolve(route)
        try:
            return self._queues[key]
        except KeyError:
            self._try_clear_inactive()
            self._queues[key] = queue = BucketQueue(
                key,
                self.store,
                self.global_lock,
                max_ratelimit_timeout=self.max_ratelimit_timeout,
            )
            return queue

    async def submit(self, route: Route, send: SendFunc, *, retry_limit: int) -> Any:
        request = QueuedRequest(route, send, retry_limit=retry_limit)
        self.get_queue(route).enqueue(request)
        return await request.future

    async def send_unqueued(self, route: Route, send: SendFunc, *, retry_limit: int) -> Any:
        request = QueuedRequest(route, send, retry_limit=retry_limit)
        while True:
            await self.global_lock.wait()
            try:
                return await send(request, None)
            except RetryRequest as exc:
                delay = request.retry(exc, self.global_lock)
                if delay is None:
                    raise exc.error from None
                if delay:
                    await asyncio.sleep(delay)

    def _learn_hash(self, route: Route, discord_hash: str, queue: BucketQueue) -> None:
        route_key = route.key
        previous = self._bucket_hashes.get(route_key)
        if previous == discord_hash:
            return

        if previous is not None:
            # Either a sub rate limit or the rate limit information genuinely changed
            fmt = 'A route (%s) has changed hashes: %s -> %s.'
            _log.debug(fmt, route_key, previous, discord_hash)
        else:
            fmt = '%s has found its initial rate limit bucket hash (%s).'
            _log.debug(fmt, route_key, discord_hash)

        self._bucket_hashes[route_key] = discord_hash
        # A queue that already owns the hash key keeps it, so pending work is never moved
        self._queues.setdefault(f'{discord_hash}:{route.major_parameters}', queue)

    def update(
        self,
        route: Route,
        queue: BucketQueue,
        headers: CIMultiDictProxy[str],
        *,
        apply_limits: bool = True,
    ) -> Optional[Bucket]:
        """Applies the rate limit headers of a response to the bucket of ``queue``."""
        discord_hash = headers.get('X-Ratelimit-Bucket')
        if discord_hash is not None:
            self._learn_hash(route, discord_hash, queue)

        if not apply_limits or 'X-Ratelimit-Remaining' not in headers:
            return None

        if 'X-Ratelimit-Reset-After' not in headers and 'X-Ratelimit-Reset' not in headers:
            return None

        bucket = self.store.update(
            queue.key,
            limit=int(headers.get('X-Ratelimit-Limit', 1)),
            remaining=int(headers['X-Ratelimit-Remaining']),
            reset_after=utils._parse_ratelimit_header(headers, use_clock=self.use_clock),
        )
        if bucket.remaining == 0:
            _log.debug(
                'A rate limit bucket (%s) has been exhausted. Pre-emptively rate limiting...',
                discord_hash or route.key,
            )
        return bucket

    def close(self) -> None:
        queues: List[BucketQueue] = list({id(q): q for q in self._queues.values()}.values())
        for queue in queues:
            queue.cancel()
        self._queues.clear()
