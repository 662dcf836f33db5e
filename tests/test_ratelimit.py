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
from typing import Any, List, Optional

import pytest

from snowtransfer.errors import RateLimited
from snowtransfer.http import Route
from snowtransfer.ratelimit import (
    Bucket,
    BucketQueue,
    BucketStore,
    GlobalLock,
    QueuedRequest,
    Ratelimiter,
    RetryRequest,
)


def messages_route(channel_id: int = 1, method: str = 'GET') -> Route:
    return Route(method, '/channels/{channel_id}/messages', channel_id=channel_id)


def ratelimit_headers(remaining: int, reset_after: float, bucket: Optional[str] = None, limit: int = 5):
    headers = {
        'X-Ratelimit-Limit': str(limit),
        'X-Ratelimit-Remaining': str(remaining),
        'X-Ratelimit-Reset-After': str(reset_after),
    }
    if bucket is not None:
        headers['X-Ratelimit-Bucket'] = bucket
    return headers


async def noop(request: QueuedRequest, queue: Optional[BucketQueue]) -> None:
    return None


def test_bucket_defaults():
    bucket = Bucket('key')
    assert bucket.limit == 1
    assert bucket.remaining == 1
    assert bucket.expires is None
    assert not bucket.is_expired(0.0)

    bucket.consume()
    bucket.consume()
    assert bucket.remaining == 0


@pytest.mark.asyncio
async def test_store_update_is_idempotent():
    store = BucketStore()
    assert store.get('key') is None
    assert 'key' not in store

    first = store.update('key', limit=5, remaining=3, reset_after=10.0)
    state = (first.limit, first.remaining, first.reset_after)
    second = store.update('key', limit=5, remaining=3, reset_after=10.0)

    assert first is second
    assert (second.limit, second.remaining, second.reset_after) == state
    assert len(store) == 1

    store.discard('key')
    store.discard('key')
    assert 'key' not in store


@pytest.mark.asyncio
async def test_store_bucket_expiry():
    loop = asyncio.get_running_loop()
    store = BucketStore()
    bucket = store.update('key', limit=2, remaining=0, reset_after=5.0)

    assert not bucket.is_expired(loop.time())
    assert bucket.is_expired(loop.time() + 5.0)

    bucket.reset()
    assert bucket.remaining == 2
    assert bucket.expires is None


@pytest.mark.asyncio
async def test_global_lock():
    loop = asyncio.get_running_loop()
    lock = GlobalLock()
    assert not lock.is_locked()

    lock.lock_for(0.1)
    assert lock.is_locked()

    # An earlier deadline never shortens the lock
    lock.lock_until(loop.time())
    assert lock.is_locked()

    start = loop.time()
    await lock.wait()
    assert loop.time() - start >= 0.09
    assert not lock.is_locked()
    assert lock.resume_at is None


@pytest.mark.asyncio
async def test_queued_request_retry_bound():
    lock = GlobalLock()
    request = QueuedRequest(messages_route(), noop, retry_limit=3)

    assert request.retry(RetryRequest(1.5, ValueError()), lock) == 1.5
    assert request.retry(RetryRequest(2.5, ValueError()), lock) == 2.5
    assert request.retry(RetryRequest(3.5, ValueError()), lock) is None
    assert request.attempt == 3


@pytest.mark.asyncio
async def test_queued_request_global_retry_locks():
    lock = GlobalLock()
    request = QueuedRequest(messages_route(), noop, retry_limit=2)

    assert request.retry(RetryRequest(5.0, ValueError(), is_global=True), lock) == 0.0
    assert lock.is_locked()


@pytest.mark.asyncio
async def test_global_retry_locks_on_last_attempt():
    lock = GlobalLock()
    request = QueuedRequest(messages_route(), noop, retry_limit=1)

    assert request.retry(RetryRequest(5.0, ValueError(), is_global=True), lock) is None
    assert lock.is_locked()


@pytest.mark.asyncio
async def test_queued_request_has_at_least_one_attempt():
    request = QueuedRequest(messages_route(), noop, retry_limit=0)
    assert request.retry_limit == 1
    assert request.retry(RetryRequest(1.0, ValueError()), GlobalLock()) is None


@pytest.mark.asyncio
async def test_submit_is_fifo():
    limiter = Ratelimiter()
    order: List[int] = []

    def sender(n: int):
        async def send(request: QueuedRequest, queue: Optional[BucketQueue]) -> int:
            await asyncio.sleep(0.01 * (5 - n))
            order.append(n)
            return n

        return send

    route = messages_route()
    results = await asyncio.gather(*(limiter.submit(route, sender(n), retry_limit=1) for n in range(5)))

    assert results == [0, 1, 2, 3, 4]
    assert order == [0, 1, 2, 3, 4]


@pytest.mark.asyncio
async def test_submit_waits_for_exhausted_bucket():
    loop = asyncio.get_running_loop()
    limiter = Ratelimiter()
    route = messages_route()
    limiter.store.update(route.bucket, limit=1, remaining=0, reset_after=0.2)

    start = loop.time()
    await limiter.submit(route, noop, retry_limit=1)
    assert loop.time() - start >= 0.19


@pytest.mark.asyncio
async def test_other_buckets_are_not_blocked():
    loop = asyncio.get_running_loop()
    limiter = Ratelimiter()
    blocked = messages_route(1)
    limiter.store.update(blocked.bucket, limit=1, remaining=0, reset_after=1.0)

    waiting = asyncio.create_task(limiter.submit(blocked, noop, retry_limit=1))
    await asyncio.sleep(0)

    start = loop.time()
    await limiter.submit(messages_route(2), noop, retry_limit=1)
    assert loop.time() - start < 0.5
    assert not waiting.done()

    limiter.close()
    with pytest.raises(asyncio.CancelledError):
        await waiting


@pytest.mark.asyncio
async def test_wait_over_maximum_raises():
    limiter = Ratelimiter(max_ratelimit_timeout=0.05)
    route = messages_route()
    limiter.store.update(route.bucket, limit=1, remaining=0, reset_after=1.0)

    with pytest.raises(RateLimited) as excinfo:
        await limiter.submit(route, noop, retry_limit=1)

    assert excinfo.value.retry_after > 0.05


@pytest.mark.asyncio
async def test_retry_until_attempts_are_used():
    limiter = Ratelimiter()
    calls = 0

    async def send(request: QueuedRequest, queue: Optional[BucketQueue]) -> Any:
        nonlocal calls
        calls += 1
        raise RetryRequest(0.0, ValueError('boom'))

    with pytest.raises(ValueError, match='boom'):
        await limiter.submit(messages_route(), send, retry_limit=3)

    assert calls == 3


@pytest.mark.asyncio
async def test_global_retry_blocks_every_bucket():
    loop = asyncio.get_running_loop()
    limiter = Ratelimiter()
    calls = 0

    async def send(request: QueuedRequest, queue: Optional[BucketQueue]) -> str:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise RetryRequest(0.2, ValueError('global'), is_global=True)
        return 'ok'

    start = loop.time()
    first = asyncio.create_task(limiter.submit(messages_route(1), send, retry_limit=3))
    await asyncio.sleep(0.05)
    assert limiter.global_lock.is_locked()

    other = await limiter.submit(messages_route(2), noop, retry_limit=1)
    assert other is None
    assert loop.time() - start >= 0.19
    assert await first == 'ok'


@pytest.mark.asyncio
async def test_cancelled_request_is_skipped():
    limiter = Ratelimiter()
    route = messages_route()
    limiter.store.update(route.bucket, limit=1, remaining=0, reset_after=0.1)
    sent: List[str] = []

    def sender(name: str):
        async def send(request: QueuedRequest, queue: Optional[BucketQueue]) -> str:
            sent.append(name)
            return name

        return send

    a = asyncio.create_task(limiter.submit(route, sender('a'), retry_limit=1))
    b = asyncio.create_task(limiter.submit(route, sender('b'), retry_limit=1))
    await asyncio.sleep(0)
    a.cancel()

    assert await b == 'b'
    assert sent == ['b']


@pytest.mark.asyncio
async def test_learning_a_bucket_hash():
    limiter = Ratelimiter()
    get = messages_route(1)
    post = messages_route(1, 'POST')
    queue = limiter.get_queue(get)
    assert limiter.resolve(get) == get.bucket

    bucket = limiter.update(get, queue, ratelimit_headers(4, 1.0, bucket='abcd'))
    assert bucket is not None
    assert bucket.remaining == 4
    assert limiter.resolve(get) == 'abcd:1'
    assert limiter.get_queue(get) is queue

    # A different route reporting the same hash ends up in the same queue
    other = limiter.get_queue(post)
    assert other is not queue
    limiter.update(post, other, ratelimit_headers(3, 1.0, bucket='abcd'))
    assert limiter.get_queue(post) is queue

    # Other channels keep their own queue
    assert limiter.get_queue(messages_route(2)) is not queue


@pytest.mark.asyncio
async def test_update_without_limits():
    limiter = Ratelimiter()
    route = messages_route()
    queue = limiter.get_queue(route)

    assert limiter.update(route, queue, ratelimit_headers(0, 1.0), apply_limits=False) is None
    assert limiter.update(route, queue, {}) is None
    assert route.bucket not in limiter.store


@pytest.mark.asyncio
async def test_inactive_queues_are_evicted():
    limiter = Ratelimiter()
    first = messages_route(0)
    limiter.store.update(first.bucket, limit=5, remaining=5, reset_after=1.0)

    for channel_id in range(256):
        limiter.get_queue(messages_route(channel_id))
    assert len(limiter) == 256

    limiter.get_queue(messages_route(256))
    assert len(limiter) == 1
    assert first.bucket not in limiter.store


@pytest.mark.asyncio
async def test_busy_queues_are_kept():
    limiter = Ratelimiter()
    busy = messages_route(0)
    limiter.store.update(busy.bucket, limit=1, remaining=0, reset_after=1.0)
    waiting = asyncio.create_task(limiter.submit(busy, noop, retry_limit=1))
    await asyncio.sleep(0)

    for channel_id in range(1, 257):
        limiter.get_queue(messages_route(channel_id))

    assert busy.bucket in limiter.store
    assert limiter.get_queue(busy).is_running()

    limiter.close()
    with pytest.raises(asyncio.CancelledError):
        await waiting
