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
import logging
import os
import sys
from functools import partial
from typing import (
    Any,
    Callable,
    ClassVar,
    Dict,
    FrozenSet,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
    TYPE_CHECKING,
    Type,
    TypeVar,
    Union,
)
from urllib.parse import quote as _uriquote

import aiohttp

from .constants import API_VERSION, BASE_HOST, DEFAULT_REQUEST_TIMEOUT, DEFAULT_RETRY_LIMIT
from .errors import (
    HTTPException,
    RateLimited,
    Unauthorized,
    Forbidden,
    NotFound,
    DiscordServerError,
)
from .file import File
from .mentions import AllowedMentions
from .ratelimit import BucketStore, Ratelimiter, RetryRequest
from . import __version__, utils
from .utils import MISSING

if TYPE_CHECKING:
    from types import TracebackType

    from typing_extensions import Self

    from .ratelimit import BucketQueue, QueuedRequest
    from .types.snowflake import Snowflake

    T = TypeVar('T')
    BE = TypeVar('BE', bound=BaseException)

__all__ = (
    'Route',
    'HTTPClient',
    'MultipartParameters',
    'RateLimitInfo',
    'encode_body',
    'prepare_message_body',
    'json_or_text',
    'MAJOR_PARAMETERS',
    'SHARED_METHOD_BUCKETS',
    'UNPARTITIONED_ROUTES',
)

_log = logging.getLogger(__name__)

# Path parameters Discord partitions rate limit buckets on
MAJOR_PARAMETERS: Tuple[str, ...] = (
    'channel_id',
    'guild_id',
    'webhook_id',
    'webhook_token',
    'interaction_id',
    'interaction_token',
)

_REACTIONS = '/channels/{channel_id}/messages/{message_id}/reactions'

# (method, path) -> shared bucket key
# Every reaction modification on a message counts against one bucket
SHARED_METHOD_BUCKETS: Dict[Tuple[str, str], str] = {
    ('PUT', _REACTIONS + '/{emoji}/@me'): f'MODIFY {_REACTIONS}',
    ('DELETE', _REACTIONS + '/{emoji}/@me'): f'MODIFY {_REACTIONS}',
    ('DELETE', _REACTIONS + '/{emoji}/{user_id}'): f'MODIFY {_REACTIONS}',
    ('DELETE', _REACTIONS + '/{emoji}'): f'MODIFY {_REACTIONS}',
    ('DELETE', _REACTIONS): f'MODIFY {_REACTIONS}',
}

# Routes that share one bucket regardless of their major parameters
UNPARTITIONED_ROUTES: FrozenSet[Tuple[str, str]] = frozenset(
    {
        ('GET', '/guilds/{guild_id}/channels'),
    }
)


async def json_or_text(response: aiohttp.ClientResponse) -> Union[Dict[str, Any], str]:
    text = await response.text(encoding='utf-8')
    # content_type drops parameters such as charset
    if response.content_type == 'application/json' and text:
        return utils._from_json(text)

    return text


class MultipartParameters(NamedTuple):
    payload: Optional[Dict[str, Any]]
    multipart: Optional[List[Dict[str, Any]]]
    files: Optional[Sequence[File]]

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BE]],
        exc: Optional[BE],
        traceback: Optional[TracebackType],
    ) -> None:
        if self.files:
            for file in self.files:
                file.close()


class RateLimitInfo(NamedTuple):
    """Describes a 429 response, passed to ``rate_limit`` event listeners.

    ``bucket`` is the key of the queue that sent the request and ``timeout``
    the number of seconds Discord asked to wait.
    """

    route: Route
    bucket: str
    remaining: int
    limit: int
    timeout: float
    is_global: bool
    scope: str


def encode_body(body: Optional[Mapping[str, Any]]) -> MultipartParameters:
    """Splits a request body into a JSON payload or a multipart form.

    A body with a non-empty ``files`` list is sent as ``multipart/form-data``:
    a ``payload_json`` part holding every other field, followed by one
    ``files[n]`` part per file. Anything else is sent as JSON. The given
    mapping is never modified.
    """
    if body is None:
        return MultipartParameters(payload=None, multipart=None, files=None)

    payload = {key: value for key, value in body.items() if key != 'files'}
    raw_files = body.get('files')
    if not raw_files:
        return MultipartParameters(payload=payload, multipart=None, files=None)

    files = [File.from_payload(f) for f in raw_files]
    if 'attachments' not in payload and any(f.description is not None for f in files):
        payload['attachments'] = [f.to_dict(index) for index, f in enumerate(files)]

    multipart: List[Dict[str, Any]] = [{'name': 'payload_json', 'value': utils._to_json(payload)}]
    for index, file in enumerate(files):
        multipart.append(
            {
                'name': f'files[{index}]',
                'value': file.fp,
                'filename': file.filename,
                'content_type': 'application/octet-stream',
            }
        )

    return MultipartParameters(payload=None, multipart=multipart, files=files)


def prepare_message_body(
    data: Union[str, Mapping[str, Any]],
    *,
    allowed_mentions: Optional[AllowedMentions] = None,
    disable_everyone: bool = False,
) -> Dict[str, Any]:
    if isinstance(data, str):
        body: Dict[str, Any] = {'content': data}
    else:
        body = dict(data)

    content = body.get('content')
    if content and disable_everyone:
        body['content'] = utils.replace_everyone(content)

    mentions = body.get('allowed_mentions', MISSING)
    if isinstance(mentions, AllowedMentions):
        if allowed_mentions is not None:
            mentions = allowed_mentions.merge(mentions)
        body['allowed_mentions'] = mentions.to_dict()
    elif mentions is MISSING and allowed_mentions is not None:
        body['allowed_mentions'] = allowed_mentions.to_dict()

    return body


class Route:
    BASE: ClassVar[str] = f'{BASE_HOST}/api/v{API_VERSION}'

    def __init__(self, method: str, path: str, *, base: Optional[str] = None, **parameters: Any) -> None:
        self.path: str = path
        self.method: str = method.upper()
        url = (base or self.BASE) + self.path
        if parameters:
            url = url.format_map({k: _uriquote(v) if isinstance(v, str) else v for k, v in parameters.items()})
        self.url: str = url
        self.parameters: Dict[str, Any] = parameters

    def __repr__(self) -> str:
        return f'<Route method={self.method} path={self.path!r} url={self.url!r}>'

    @property
    def key(self) -> str:
        """The route key is used to represent the route in various mappings."""
        try:
            return SHARED_METHOD_BUCKETS[(self.method, self.path)]
        except KeyError:
            return f'{self.method} {self.path}'

    @property
    def major_parameters(self) -> str:
        """Returns the major parameters formatted a string.

        This needs to be appended to a bucket hash to constitute as a full rate limit key.
        """
        if (self.method, self.path) in UNPARTITIONED_ROUTES:
            return ''

        params = self.parameters
        return '+'.join(str(params[k]) for k in MAJOR_PARAMETERS if params.get(k) is not None)

    @property
    def bucket(self) -> str:
        """The bucket key used until Discord reports a bucket hash for this route."""
        return f'{self.key}:{self.major_parameters}'


class HTTPClient:
    """Represents an HTTP client sending rate limited HTTP requests to the Discord API."""

    def __init__(
        self,
        token: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        connector: Optional[aiohttp.BaseConnector] = None,
        proxy: Optional[str] = None,
        proxy_auth: Optional[aiohttp.BasicAuth] = None,
        unsync_clock: bool = True,
        http_trace: Optional[aiohttp.TraceConfig] = None,
        max_ratelimit_timeout: Optional[float] = None,
        bypass_ratelimits: bool = False,
        retry_requests: bool = True,
        retry_limit: int = DEFAULT_RETRY_LIMIT,
        retry_delay: float = 1.0,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        store: Optional[BucketStore] = None,
        dispatch: Optional[Callable[..., Any]] = None,
    ) -> None:
        self.connector: aiohttp.BaseConnector = connector or MISSING
        self.__session: aiohttp.ClientSession = MISSING
        self.token: Optional[str] = token
        self.base_url: str = (base_url or Route.BASE).rstrip('/')
        self.proxy: Optional[str] = proxy
        self.proxy_auth: Optional[aiohttp.BasicAuth] = proxy_auth
        self.http_trace: Optional[aiohttp.TraceConfig] = http_trace
        self.use_clock: bool = not unsync_clock
        self.max_ratelimit_timeout: Optional[float] = max(30.0, max_ratelimit_timeout) if max_ratelimit_timeout else None
        self.bypass_ratelimits: bool = bypass_ratelimits
        self.retry_requests: bool = retry_requests
        self.retry_limit: int = retry_limit
        self.retry_delay: float = retry_delay
        self.timeout: aiohttp.ClientTimeout = aiohttp.ClientTimeout(total=request_timeout)
        self.ratelimiter: Ratelimiter = Ratelimiter(
            store,
            max_ratelimit_timeout=self.max_ratelimit_timeout,
            use_clock=self.use_clock,
        )
        self._latency: float = float('nan')
        self._dispatch: Callable[..., Any] = dispatch if dispatch is not None else (lambda event, *args: None)

        user_agent = 'DiscordBot (https://github.com/DasWolke/SnowTransfer {0}) Python/{1[0]}.{1[1]} aiohttp/{2}'
        self.user_agent: str = user_agent.format(__version__, sys.version_info, aiohttp.__version__)

    def __del__(self) -> None:
        session = self.__session
        if session:
            try:
                session.connector._close()  # type: ignore # Handled below
            except AttributeError:
                pass

    @property
    def store(self) -> BucketStore:
        return self.ratelimiter.store

    @property
    def latency(self) -> float:
        """:class:`float`: The duration in seconds of the last round trip to Discord.

        This is ``nan`` until a request completed.
        """
        return self._latency

    @property
    def closed(self) -> bool:
        return self.__session is MISSING or self.__session.closed

    async def startup(self) -> None:
        if self.__session and not self.__session.closed:
            return

        self.__session = aiohttp.ClientSession(
            connector=self.connector or None,
            trace_configs=None if self.http_trace is None else [self.http_trace],
        )

    def route(self, method: str, path: str, **parameters: Any) -> Route:
        return Route(method, path, base=self.base_url, **parameters)

    async def request(
        self,
        route: Route,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Any] = None,
        form: Optional[List[Dict[str, Any]]] = None,
        files: Optional[Sequence[File]] = None,
        reason: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        retry_limit: Optional[int] = None,
        raw: bool = False,
        auth: bool = True,
    ) -> Any:
        await self.startup()

        # Header creation
        request_headers: Dict[str, str] = {
            'User-Agent': self.user_agent,
        }

        if self.token is not None and auth:
            request_headers['Authorization'] = self.token

        if reason:
            request_headers['X-Audit-Log-Reason'] = _uriquote(reason, safe='/ ')

        kwargs: Dict[str, Any] = {}
        if json is not None:
            request_headers['Content-Type'] = 'application/json'
            kwargs['data'] = utils._to_json(json)

        if headers:
            request_headers.update(headers)

        kwargs['headers'] = request_headers
        kwargs['timeout'] = self.timeout

        query = utils._to_query(params)
        if query:
            kwargs['params'] = query

        # Proxy support
        if self.proxy is not None:
            kwargs['proxy'] = self.proxy
        if self.proxy_auth is not None:
            kwargs['proxy_auth'] = self.proxy_auth

        request_id = os.urandom(16).hex()
        send = partial(self._send, request_id=request_id, form=form, files=files, raw=raw, kwargs=kwargs)
        limit = self.retry_limit if retry_limit is None else retry_limit
        try:
            if self.bypass_ratelimits:
                return await self.ratelimiter.send_unqueued(route, send, retry_limit=limit)
            return await self.ratelimiter.submit(route, send, retry_limit=limit)
        except Exception as e:
            self._dispatch('request_error', request_id, e)
            raise

    def _backoff(self, attempt: int) -> float:
        return self.retry_delay * (1 + attempt * 2)

    async def _send(
        self,
        request: QueuedRequest,
        queue: Optional[BucketQueue],
        *,
        request_id: str,
        form: Optional[List[Dict[str, Any]]],
        files: Optional[Sequence[File]],
        raw: bool,
        kwargs: Dict[str, Any],
    ) -> Any:
        route = request.route
        method = route.method
        url = route.url
        attempt = request.attempt

        if files:
            for f in files:
                f.reset(seek=attempt)

        if form:
            # With quote_fields=True '[' and ']' in file field names are escaped, which Discord does not support
            form_data = aiohttp.FormData(quote_fields=False)
            for params in form:
                form_data.add_field(**params)
            kwargs['data'] = form_data

        self._dispatch('request', request_id, route)
        loop = asyncio.get_running_loop()
        start = loop.time()
        try:
            async with self.__session.request(method, url, **kwargs) as response:
                self._latency = loop.time() - start
                _log.debug('%s %s with %s has returned %s.', method, url, kwargs.get('data'), response.status)

                if queue is not None:
                    self.ratelimiter.update(route, queue, response.headers, apply_limits=response.status != 429)

                if raw and 300 > response.status >= 200:
                    # The body is cached on the response so it stays readable once the connection is released
                    await response.read()
                    self._dispatch('request_done', request_id, response)
                    return response

                data = await json_or_text(response)

                # Request was successful so just return the text/json
                if 300 > response.status >= 200:
                    _log.debug('%s %s has received %s.', method, url, data)
                    self._dispatch('request_done', request_id, response)
                    return data

                # Rate limited
                if response.status == 429:
                    if not isinstance(data, dict):
                        # Banned by Cloudflare more than likely.
                        raise HTTPException(response, data)

                    retry_after = data.get('retry_after')
                    if retry_after is None:
                        retry_after = response.headers.get('Retry-After', 1)
                    retry_after = float(retry_after)

                    if self.max_ratelimit_timeout and retry_after > self.max_ratelimit_timeout:
                        _log.warning(
                            'We are being rate limited. %s %s responded with 429. Timeout of %.2f was too long, erroring instead.',
                            method,
                            url,
                            retry_after,
                        )
                        raise RateLimited(retry_after)

                    fmt = 'We are being rate limited. %s %s responded with 429. Retrying in %.2f seconds.'
                    _log.warning(fmt, method, url, retry_after)

                    bucket = queue.key if queue is not None else route.bucket
                    scope = response.headers.get('X-Ratelimit-Scope', 'user')
                    _log.debug(
                        'Rate limit is being handled by bucket %s with %r major parameters (scope: %s)',
                        bucket,
                        route.major_parameters,
                        scope,
                    )

                    # Check if it's a global rate limit
                    is_global = bool(data.get('global', False)) or response.headers.get('X-Ratelimit-Global') == 'true'
                    if is_global:
                        _log.warning('Global rate limit has been hit. Retrying in %.2f seconds.', retry_after)

                    info = RateLimitInfo(
                        route=route,
                        bucket=bucket,
                        remaining=int(response.headers.get('X-Ratelimit-Remaining', 0)),
                        limit=int(response.headers.get('X-Ratelimit-Limit', 1)),
                        timeout=retry_after,
                        is_global=is_global,
                        scope=scope,
                    )
                    self._dispatch('rate_limit', info)
                    raise RetryRequest(retry_after, HTTPException(response, data), is_global=is_global)

                # Every 5xx is retried while attempts remain
                if response.status >= 500:
                    error = DiscordServerError(response, data)
                    if self.retry_requests:
                        raise RetryRequest(self._backoff(attempt), error)
                    raise error

                # Usual error cases
                if response.status == 401:
                    raise Unauthorized(response, data)
                elif response.status == 403:
                    raise Forbidden(response, data)
                elif response.status == 404:
                    raise NotFound(response, data)
                else:
                    raise HTTPException(response, data)

        # This is handling exceptions from the request
        except (aiohttp.ClientConnectionError, OSError, asyncio.TimeoutError) as e:
            if not self.retry_requests:
                raise
            _log.debug('%s %s failed with %r. Retrying...', method, url, e)
            raise RetryRequest(self._backoff(attempt), e) from e

    async def get_from_cdn(self, url: str) -> bytes:
        await self.startup()
        async with self.__session.get(url, timeout=self.timeout) as resp:
            if resp.status == 200:
                return await resp.read()
            elif resp.status == 404:
                raise NotFound(resp, 'asset not found')
            elif resp.status == 403:
                raise Forbidden(resp, 'cannot retrieve asset')
            else:
                raise HTTPException(resp, 'failed to get asset')

    # State management

    async def close(self) -> None:
        self.ratelimiter.close()
        if self.__session:
            await self.__session.close()
