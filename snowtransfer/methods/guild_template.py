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

if TYPE_CHECKING:
    from ..http import HTTPClient
    from ..types.snowflake import Snowflake

# fmt: off
__all__ = (
    'GuildTemplateMethods',
)
# fmt: on


class GuildTemplateMethods:
    def __init__(self, http: HTTPClient) -> None:
        self.http: HTTPClient = http

    async def get_guild_template(self, code: str) -> Dict[str, Any]:
        r = self.http.route('GET', '/guilds/templates/{code}', code=code)
        return await self.http.request(r)

    async def create_guild_from_guild_template(self, code: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        r = self.http.route('POST', '/guilds/templates/{code}', code=code)
        return await self.http.request(r, json=dict(data))

    async def get_guild_templates(self, guild_id: Snowflake) -> List[Dict[str, Any]]:
        r = self.http.route('GET', '/guilds/{guild_id}/templates', guild_id=guild_id)
        return await self.http.request(r)

    async def create_guild_template(
        self, guild_id: Snowflake, data: Mapping[str, Any], *, reason: Optional[str] = None
    ) -> Dict[str, Any]:
        r = self.http.route('POST', '/guilds/{guild_id}/templates', guild_id=guild_id)
        return await self.http.request(r, json=dict(data), reason=reason)

    async def sync_guild_template(self, guild_id: Snowflake, code: str) -> Dict[str, Any]:
        r = self.http.route('PUT', '/guilds/{guild_id}/templates/{code}', guild_id=guild_id, code=code)
        return await self.http.request(r)

    async def modify_guild_template(self, guild_id: Snowflake, code: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        r = self.http.route('PATCH', '/guilds/{guild_id}/templates/{code}', guild_id=guild_id, code=code)
        return await self.http.request(r, json=dict(data))

    async def delete_guild_template(self, guild_id: Snowflake, code: str) -> Dict[str, Any]:
        r = self.http.route('DELETE', '/guilds/{guild_id}/templates/{code}', guild_id=guild_id, code=code)
        return await self.http.request(r)
