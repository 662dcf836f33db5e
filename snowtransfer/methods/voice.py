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

from typing import TYPE_CHECKING, Any, Dict, List, Mapping

if TYPE_CHECKING:
    from ..http import HTTPClient
    from ..types.snowflake import Snowflake

# fmt: off
__all__ = (
    'VoiceMethods',
)
# fmt: on


class VoiceMethods:
    def __init__(self, http: HTTPClient) -> None:
        self.http: HTTPClient = http

    async def get_voice_regions(self) -> List[Dict[str, Any]]:
        r = self.http.route('GET', '/voice/regions')
        return await self.http.request(r)

    async def get_current_user_voice_state(self, guild_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('GET', '/guilds/{guild_id}/voice-states/@me', guild_id=guild_id)
        return await self.http.request(r)

    async def get_user_voice_state(self, guild_id: Snowflake, user_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('GET', '/guilds/{guild_id}/voice-states/{user_id}', guild_id=guild_id, user_id=user_id)
        return await self.http.request(r)

    async def update_current_user_voice_state(self, guild_id: Snowflake, data: Mapping[str, Any]) -> None:
        r = self.http.route('PATCH', '/guilds/{guild_id}/voice-states/@me', guild_id=guild_id)
        await self.http.request(r, json=dict(data))

    async def update_user_voice_state(self, guild_id: Snowflake, user_id: Snowflake, data: Mapping[str, Any]) -> None:
        r = self.http.route('PATCH', '/guilds/{guild_id}/voice-states/{user_id}', guild_id=guild_id, user_id=user_id)
        await self.http.request(r, json=dict(data))
