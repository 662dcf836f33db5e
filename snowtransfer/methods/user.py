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

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from .. import utils

if TYPE_CHECKING:
    from ..http import HTTPClient
    from ..types.snowflake import Snowflake

# fmt: off
__all__ = (
    'UserMethods',
)
# fmt: on


class UserMethods:
    """Methods for the current user and other users."""

    def __init__(self, http: HTTPClient) -> None:
        self.http: HTTPClient = http

    async def get_self(self) -> Dict[str, Any]:
        r = self.http.route('GET', '/users/@me')
        return await self.http.request(r)

    async def get_user(self, user_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('GET', '/users/{user_id}', user_id=user_id)
        return await self.http.request(r)

    async def update_self(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Edits the current user.

        An ``avatar`` or ``banner`` given as :class:`bytes` is converted to a data URI.
        """
        payload = dict(data)
        for key in ('avatar', 'banner'):
            if isinstance(payload.get(key), bytes):
                payload[key] = utils._bytes_to_base64_data(payload[key])

        r = self.http.route('PATCH', '/users/@me')
        return await self.http.request(r, json=payload)

    async def get_guilds(self, options: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        r = self.http.route('GET', '/users/@me/guilds')
        return await self.http.request(r, params=options)

    async def leave_guild(self, guild_id: Snowflake) -> None:
        r = self.http.route('DELETE', '/users/@me/guilds/{guild_id}', guild_id=guild_id)
        await self.http.request(r)

    async def create_direct_message_channel(self, user_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('POST', '/users/@me/channels')
        return await self.http.request(r, json={'recipient_id': str(user_id)})
