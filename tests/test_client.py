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
import math
from typing import Any, List

import pytest

import snowtransfer
from snowtransfer import AllowedMentions, ClientException, SnowTransfer
from snowtransfer.http import RateLimitInfo
from snowtransfer.ratelimit import BucketStore


@pytest.mark.parametrize(
    ('token', 'expected'),
    [
        ('abc', 'Bot abc'),
        ('  abc  ', 'Bot abc'),
        ('Bot abc', 'Bot abc'),
        ('Bearer abc', 'Bearer abc'),
        (None, None),
    ],
)
def test_token_prefix(token, expected):
    client = SnowTransfer(token)
    assert client.http.token == expected


@pytest.mark.parametrize('token', ['', '   '])
def test_empty_token(token: str):
    with pytest.raises(ClientException):
        SnowTransfer(token)


def test_default_options():
    client = SnowTransfer('abc')
    http = client.http

    assert http.base_url == 'https://discord.com/api/v10'
    assert http.retry_limit == 3
    assert http.retry_requests is True
    assert http.bypass_ratelimits is False
    assert http.max_ratelimit_timeout is None
    assert http.timeout.total == 15.0
    assert math.isnan(client.latency)
    assert client.is_closed()


def test_options():
    store = BucketStore()
    mentions = AllowedMentions(everyone=False)
    client = SnowTransfer(
        'abc',
        base_host='http://localhost:8080/',
        api_version=9,
        retry_limit=5,
        retry_delay=0.5,
        request_timeout=2.5,
        max_ratelimit_timeout=10.0,
        allowed_mentions=mentions,
        disable_everyone=True,
        store=store,
    )
    http = client.http

    assert http.base_url == 'http://localhost:8080/api/v9'
    assert http.route('GET', '/gateway').url == 'http://localhost:8080/api/v9/gateway'
    assert http.retry_limit == 5
    assert http.retry_delay == 0.5
    assert http.timeout.total == 2.5
    assert http.max_ratelimit_timeout == 30.0
    assert http.store is store

    assert client.channel.allowed_mentions is mentions
    assert client.channel.disable_everyone is True
    assert client.webhook.disable_everyone is True
    assert client.interaction.allowed_mentions is mentions


def test_method_groups_share_the_http_client():
    client = SnowTransfer('abc')
    groups = [
        client.bot,
        client.channel,
        client.guild,
        client.user,
        client.webhook,
        client.interaction,
        client.invite,
        client.stage_instance,
        client.guild_template,
        client.assets,
        client.audit_log,
        client.voice,
    ]
    assert all(group.http is client.http for group in groups)


def test_version_info():
    assert snowtransfer.__version__ == '{0.major}.{0.minor}.{0.micro}'.format(snowtransfer.version_info)


@pytest.mark.asyncio
async def test_context_manager_closes():
    async with SnowTransfer('abc') as client:
        assert not client.is_closed()

    assert client.is_closed()


def test_client_dispatches_http_events():
    client = SnowTransfer('abc')
    assert client.http._dispatch == client.dispatch


@pytest.mark.asyncio
async def test_event_handlers_are_scheduled():
    client = SnowTransfer('abc')
    received: List[Any] = []

    @client.event
    async def on_rate_limit(info: RateLimitInfo) -> None:
        received.append(info)

    info = RateLimitInfo(
        route=client.http.route('GET', '/gateway'),
        bucket='GET /gateway:',
        remaining=0,
        limit=1,
        timeout=1.5,
        is_global=False,
        scope='user',
    )
    client.dispatch('rate_limit', info)
    # Events without a handler are ignored
    client.dispatch('request_done', 'id', None)
    await asyncio.sleep(0)

    assert received == [info]


def test_event_must_be_a_coroutine():
    client = SnowTransfer('abc')

    def on_request(request_id: str, route: Any) -> None:
        pass

    with pytest.raises(TypeError):
        client.event(on_request)


@pytest.mark.asyncio
async def test_event_errors_are_logged(caplog: pytest.LogCaptureFixture):
    client = SnowTransfer('abc')

    @client.event
    async def on_request_error(request_id: str, error: Exception) -> None:
        raise RuntimeError('handler failed')

    with caplog.at_level(logging.ERROR, logger='snowtransfer.client'):
        client.dispatch('request_error', 'id', ValueError())
        await asyncio.sleep(0)

    assert 'Ignoring exception in on_request_error' in caplog.text
