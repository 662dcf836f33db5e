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
from typing import TYPE_CHECKING, Any, Callable, Coroutine, Optional, Type, TypedDict, TypeVar

import aiohttp

from .constants import API_VERSION, BASE_HOST, DEFAULT_REQUEST_TIMEOUT, DEFAULT_RETRY_LIMIT
from .errors import ClientException
from .http import HTTPClient
from .methods import (
    AuditLogMethods,
    BotMethods,
    ChannelMethods,
    GuildAssetsMethods,
    GuildMethods,
    GuildTemplateMethods,
    InteractionMethods,
    InviteMethods,
    StageInstanceMethods,
    UserMethods,
    VoiceMethods,
    WebhookMethods,
)

if TYPE_CHECKING:
    from types import TracebackType

    from typing_extensions import Self, Unpack

    from .mentions import AllowedMentions
    from .ratelimit import BucketStore

Coro = Coroutine[Any, Any, Any]
CoroT = TypeVar('CoroT', bound=Callable[..., Coro])

# fmt: off
__all__ = (
    'SnowTransfer',
)
# fmt: on

_log = logging.getLogger(__name__)


class _ClientOptions(TypedDict, total=False):
    base_host: str
    api_version: int
    allowed_mentions: Optional[AllowedMentions]
    disable_everyone: bool
    bypass_ratelimits: bool
    retry_requests: bool
    retry_limit: int
    retry_delay: float
    request_timeout: float
    max_ratelimit_timeout: Optional[float]
    unsync_clock: bool
    connector: Optional[aiohttp.BaseConnector]
    proxy: Optional[str]
    proxy_auth: Optional[aiohttp.BasicAuth]
    http_trace: Optional[aiohttp.TraceConfig]
    store: Optional[BucketStore]


def _prefix_token(token: Optional[str]) -> Optional[str]:
    if token is None:
        return None

    token = token.strip()
    if not token:
        raise ClientException('Missing token')

    if token.startswith(('Bot ', 'Bearer ')):
        return token
    return f'Bot {token}'


class SnowTransfer:
    r"""Represents a client of the Discord REST API.

    Every request goes through a single :class:`~snowtransfer.http.HTTPClient`
    which queues requests per rate limit bucket. The API itself is reached
    through the method groups exposed as attributes.

    This class can be used as an asynchronous context manager, which closes
    the HTTP session on exit.

    .. code-block:: python3

        async with SnowTransfer(token) as client:
            await client.channel.create_message(channel_id, 'Hello!')

    Parameters
    -----------
    token: Optional[:class:`str`]
        The token to authenticate with. Tokens without a ``Bot`` or ``Bearer``
        prefix are treated as bot tokens. Without a token only unauthenticated
        routes, such as executing webhooks, can be used.
    base_host: :class:`str`
        The host requests are sent to. Defaults to ``https://discord.com``.
    api_version: :class:`int`
        The API version to use. Defaults to ``10``.
    allowed_mentions: Optional[:class:`AllowedMentions`]
        Control how the client handles mentions by default on every message sent.
    disable_everyone: :class:`bool`
        Whether to defuse everyone and here mentions in the content of every
        message sent. Defaults to ``False``.
    bypass_ratelimits: :class:`bool`
        Whether to send requests immediately without waiting on rate limit
        buckets. Global rate limits are still honoured. Defaults to ``False``.
    retry_requests: :class:`bool`
        Whether to retry requests that failed with a server error or a network
        error. Defaults to ``True``.
    retry_limit: :class:`int`
        The maximum number of attempts per request. Defaults to ``3``.
    retry_delay: :class:`float`
        The base of the backoff between retried attempts, in seconds. Defaults to ``1``.
    request_timeout: :class:`float`
        The maximum number of seconds a single attempt may take. Defaults to ``15``.
    max_ratelimit_timeout: Optional[:class:`float`]
        The maximum number of seconds to wait when a non-global rate limit is encountered.
        If a request requires sleeping for more than the seconds passed in, then
        :exc:`~snowtransfer.RateLimited` will be raised. By default, there is no timeout limit.
        In order to prevent misuse and unnecessary bans, the minimum value this can be
        set to is ``30.0`` seconds.
    unsync_clock: :class:`bool`
        Whether to assume the system clock is unsynced. If this is set to ``True``, the
        default, then the library uses the time to reset a rate limit bucket given by
        Discord. If this is ``False`` then your system clock is used to calculate how
        long to sleep for.
    connector: Optional[:class:`aiohttp.BaseConnector`]
        The aiohttp connector to use for this client.
    proxy: Optional[:class:`str`]
        Proxy URL.
    proxy_auth: Optional[:class:`aiohttp.BasicAuth`]
        An object that represents proxy HTTP Basic Authorization.
    http_trace: :class:`aiohttp.TraceConfig`
        The trace configuration to use for tracking HTTP requests the library does using ``aiohttp``.
    store: Optional[:class:`~snowtransfer.ratelimit.BucketStore`]
        The store holding rate limit state. A new one is created if not given.
    """

    def __init__(self, token: Optional[str] = None, **options: Unpack[_ClientOptions]) -> None:
        base_host = options.get('base_host', BASE_HOST).rstrip('/')
        api_version = options.get('api_version', API_VERSION)
        max_ratelimit_timeout = options.get('max_ratelimit_timeout', None)
        self.http: HTTPClient = HTTPClient(
            _prefix_token(token),
            base_url=f'{base_host}/api/v{api_version}',
            connector=options.get('connector', None),
            proxy=options.get('proxy', None),
            proxy_auth=options.get('proxy_auth', None),
            unsync_clock=options.get('unsync_clock', True),
            http_trace=options.get('http_trace', None),
            max_ratelimit_timeout=max_ratelimit_timeout,
            bypass_ratelimits=options.get('bypass_ratelimits', False),
            retry_requests=options.get('retry_requests', True),
            retry_limit=options.get('retry_limit', DEFAULT_RETRY_LIMIT),
            retry_delay=options.get('retry_delay', 1.0),
            request_timeout=options.get('request_timeout', DEFAULT_REQUEST_TIMEOUT),
            store=options.get('store', None),
            dispatch=self.dispatch,
        )

        allowed_mentions = options.get('allowed_mentions', None)
        disable_everyone = options.get('disable_everyone', False)
        self.allowed_mentions: Optional[AllowedMentions] = allowed_mentions

        self.bot: BotMethods = BotMethods(self.http)
        self.channel: ChannelMethods = ChannelMethods(
            self.http, disable_everyone=disable_everyone, allowed_mentions=allowed_mentions
        )
        self.guild: GuildMethods = GuildMethods(self.http)
        self.user: UserMethods = UserMethods(self.http)
        self.webhook: WebhookMethods = WebhookMethods(
            self.http, disable_everyone=disable_everyone, allowed_mentions=allowed_mentions
        )
        self.interaction: InteractionMethods = InteractionMethods(self.http, allowed_mentions=allowed_mentions)
        self.invite: InviteMethods = InviteMethods(self.http)
        self.stage_instance: StageInstanceMethods = StageInstanceMethods(self.http)
        self.guild_template: GuildTemplateMethods = GuildTemplateMethods(self.http)
        self.assets: GuildAssetsMethods = GuildAssetsMethods(self.http)
        self.audit_log: AuditLogMethods = AuditLogMethods(self.http)
        self.voice: VoiceMethods = VoiceMethods(self.http)

        _log.debug('Client created for %s with %d attempts per request.', self.http.base_url, self.http.retry_limit)

    async def __aenter__(self) -> Self:
        await self.http.startup()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.close()

    @property
    def latency(self) -> float:
        """:class:`float`: Measures the duration of the last REST round trip in seconds."""
        return self.http.latency

    def is_closed(self) -> bool:
        """:class:`bool`: Indicates if the HTTP session is closed."""
        return self.http.closed

    async def close(self) -> None:
        """Closes the HTTP session and cancels every queued request."""
        await self.http.close()

    # events

    async def _run_event(
        self,
        coro: Callable[..., Coro],
        event_name: str,
        *args: Any,
        **kwargs: Any,
    ) -> None:
        try:
            await coro(*args, **kwargs)
        except asyncio.CancelledError:
            pass
        except Exception:
            try:
                await self.on_error(event_name, *args, **kwargs)
            except asyncio.CancelledError:
                pass

    def _schedule_event(
        self,
        coro: Callable[..., Coro],
        event_name: str,
        *args: Any,
        **kwargs: Any,
    ) -> asyncio.Task:
        wrapped = self._run_event(coro, event_name, *args, **kwargs)
        # Schedules the task
        return asyncio.get_running_loop().create_task(wrapped, name=f'snowtransfer: {event_name}')

    def dispatch(self, event: str, /, *args: Any, **kwargs: Any) -> None:
        """Runs the ``on_<event>`` handler registered on this client, if any.

        The HTTP client dispatches the following events:

        - ``request(request_id, route)`` before every attempt of a request.
        - ``request_done(request_id, response)`` when a request succeeded.
        - ``request_error(request_id, error)`` when a request failed for good.
        - ``rate_limit(info)`` with a :class:`~snowtransfer.http.RateLimitInfo`
          whenever Discord responds with 429.
        """
        _log.debug('Dispatching event %s', event)
        method = 'on_' + event

        try:
            coro = getattr(self, method)
        except AttributeError:
            pass
        else:
            self._schedule_event(coro, method, *args, **kwargs)

    async def on_error(self, event_method: str, /, *args: Any, **kwargs: Any) -> None:
        """|coro|

        The default error handler for event handlers.

        By default this logs to the library logger however it could be
        overridden to have a different implementation.
        """
        _log.exception('Ignoring exception in %s', event_method)

    def event(self, coro: CoroT, /) -> CoroT:
        """A decorator that registers an event to listen to.

        The events must be a :ref:`coroutine <coroutine>`, if not, :exc:`TypeError` is raised.

        .. code-block:: python3

            @client.event
            async def on_rate_limit(info):
                print(f'{info.route.method} {info.route.path} is limited for {info.timeout}s')

        Raises
        --------
        TypeError
            The coroutine passed is not actually a coroutine.
        """

        if not asyncio.iscoroutinefunction(coro):
            raise TypeError('event registered must be a coroutine function')

        setattr(self, coro.__name__, coro)
        _log.debug('%s has successfully been registered as an event', coro.__name__)
        return coro
