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

from typing import TYPE_CHECKING, Any, Dict, Mapping

if TYPE_CHECKING:
    from ..http import HTTPClient
    from ..types.gateway import Gateway, GatewayBot

# fmt: off
__all__ = (
    'BotMethods',
)
# fmt: on


class BotMethods:
    """Methods for the gateway and the bot's application."""

    def __init__(self, http: HTTPClient) -> None:
        self.http: HTTPClient = http

    async def get_gateway(self) -> Gateway:
        r = self.http.route('GET', '/gateway')
        return await self.http.request(r, auth=False)

    async def get_gateway_bot(self) -> GatewayBot:
        """Gets the gateway URL along with the recommended shard count and session start limits."""
        r = self.http.route('GET', '/gateway/bot')
        return await self.http.request(r)

    async def get_application_info(self) -> Dict[str, Any]:
        r = self.http.route('GET', '/applications/@me')
        return await self.http.request(r)

    async def update_application_info(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        r = self.http.route('PATCH', '/applications/@me')
        return await self.http.request(r, json=dict(data))
