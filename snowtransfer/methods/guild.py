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

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

from ..constants import (
    GET_GUILD_MEMBERS_MAX_RESULTS,
    GET_GUILD_MEMBERS_MIN_RESULTS,
    SEARCH_MEMBERS_MAX_RESULTS,
    SEARCH_MEMBERS_MIN_RESULTS,
)

if TYPE_CHECKING:
    from aiohttp import ClientResponse

    from ..http import HTTPClient
    from ..types.snowflake import Snowflake

# fmt: off
__all__ = (
    'GuildMethods',
)
# fmt: on


def _check_limit(options: Optional[Mapping[str, Any]], minimum: int, maximum: int, what: str) -> None:
    if not options:
        return

    limit = options.get('limit')
    if limit is not None and not (minimum <= limit <= maximum):
        raise ValueError(f'Amount of {what} that may be requested has to be between {minimum} and {maximum}')


class GuildMethods:
    """Methods for interacting with guilds, their channels, members, bans, roles and integrations."""

    def __init__(self, http: HTTPClient) -> None:
        self.http: HTTPClient = http

    async def create_guild(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        r = self.http.route('POST', '/guilds')
        return await self.http.request(r, json=dict(data))

    async def get_guild(self, guild_id: Snowflake, *, with_counts: bool = False) -> Dict[str, Any]:
        r = self.http.route('GET', '/guilds/{guild_id}', guild_id=guild_id)
        return await self.http.request(r, params={'with_counts': with_counts})

    async def get_guild_preview(self, guild_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('GET', '/guilds/{guild_id}/preview', guild_id=guild_id)
        return await self.http.request(r)

    async def update_guild(
        self, guild_id: Snowflake, data: Mapping[str, Any], *, reason: Optional[str] = None
    ) -> Dict[str, Any]:
        r = self.http.route('PATCH', '/guilds/{guild_id}', guild_id=guild_id)
        return await self.http.request(r, json=dict(data), reason=reason)

    async def delete_guild(self, guild_id: Snowflake) -> None:
        r = self.http.route('DELETE', '/guilds/{guild_id}', guild_id=guild_id)
        await self.http.request(r)

    # Channels

    async def get_guild_channels(self, guild_id: Snowflake) -> List[Dict[str, Any]]:
        """Gets the channels of a guild.

        Every guild shares a single rate limit bucket for this route.
        """
        r = self.http.route('GET', '/guilds/{guild_id}/channels', guild_id=guild_id)
        return await self.http.request(r)

    async def create_guild_channel(
        self, guild_id: Snowflake, data: Mapping[str, Any], *, reason: Optional[str] = None
    ) -> Dict[str, Any]:
        r = self.http.route('POST', '/guilds/{guild_id}/channels', guild_id=guild_id)
        return await self.http.request(r, json=dict(data), reason=reason)

    async def update_channel_positions(
        self, guild_id: Snowflake, data: Sequence[Mapping[str, Any]], *, reason: Optional[str] = None
    ) -> None:
        r = self.http.route('PATCH', '/guilds/{guild_id}/channels', guild_id=guild_id)
        await self.http.request(r, json=[dict(d) for d in data], reason=reason)

    async def list_active_threads(self, guild_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('GET', '/guilds/{guild_id}/threads/active', guild_id=guild_id)
        return await self.http.request(r)

    # Members

    async def get_guild_member(self, guild_id: Snowflake, member_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('GET', '/guilds/{guild_id}/members/{member_id}', guild_id=guild_id, member_id=member_id)
        return await self.http.request(r)

    async def get_guild_members(
        self, guild_id: Snowflake, options: Optional[Mapping[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Gets a page of the members of a guild.

        Raises
        -------
        ValueError
            ``limit`` is not between 1 and 1000.
        """
        _check_limit(options, GET_GUILD_MEMBERS_MIN_RESULTS, GET_GUILD_MEMBERS_MAX_RESULTS, 'members')
        r = self.http.route('GET', '/guilds/{guild_id}/members', guild_id=guild_id)
        return await self.http.request(r, params=options)

    async def search_guild_members(
        self, guild_id: Snowflake, query: str, *, limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Searches the members of a guild whose username or nickname starts with ``query``.

        Raises
        -------
        ValueError
            ``limit`` is not between 1 and 1000.
        """
        options = {'query': query, 'limit': limit}
        _check_limit(options, SEARCH_MEMBERS_MIN_RESULTS, SEARCH_MEMBERS_MAX_RESULTS, 'members')
        r = self.http.route('GET', '/guilds/{guild_id}/members/search', guild_id=guild_id)
        return await self.http.request(r, params=options)

    async def add_guild_member(
        self, guild_id: Snowflake, member_id: Snowflake, data: Mapping[str, Any]
    ) -> Optional[Dict[str, Any]]:
        r = self.http.route('PUT', '/guilds/{guild_id}/members/{member_id}', guild_id=guild_id, member_id=member_id)
        return await self.http.request(r, json=dict(data))

    async def update_guild_member(
        self,
        guild_id: Snowflake,
        member_id: Snowflake,
        data: Mapping[str, Any],
        *,
        reason: Optional[str] = None,
    ) -> Dict[str, Any]:
        r = self.http.route(
            'PATCH', '/guilds/{guild_id}/members/{member_id}', guild_id=guild_id, member_id=member_id
        )
        return await self.http.request(r, json=dict(data), reason=reason)

    async def update_self(
        self, guild_id: Snowflake, data: Mapping[str, Any], *, reason: Optional[str] = None
    ) -> Dict[str, Any]:
        r = self.http.route('PATCH', '/guilds/{guild_id}/members/@me', guild_id=guild_id)
        return await self.http.request(r, json=dict(data), reason=reason)

    async def add_guild_member_role(
        self,
        guild_id: Snowflake,
        member_id: Snowflake,
        role_id: Snowflake,
        *,
        reason: Optional[str] = None,
    ) -> None:
        r = self.http.route(
            'PUT',
            '/guilds/{guild_id}/members/{member_id}/roles/{role_id}',
            guild_id=guild_id,
            member_id=member_id,
            role_id=role_id,
        )
        await self.http.request(r, reason=reason)

    async def remove_guild_member_role(
        self,
        guild_id: Snowflake,
        member_id: Snowflake,
        role_id: Snowflake,
        *,
        reason: Optional[str] = None,
    ) -> None:
        r = self.http.route(
            'DELETE',
            '/guilds/{guild_id}/members/{member_id}/roles/{role_id}',
            guild_id=guild_id,
            member_id=member_id,
            role_id=role_id,
        )
        await self.http.request(r, reason=reason)

    async def remove_guild_member(
        self, guild_id: Snowflake, member_id: Snowflake, *, reason: Optional[str] = None
    ) -> None:
        r = self.http.route(
            'DELETE', '/guilds/{guild_id}/members/{member_id}', guild_id=guild_id, member_id=member_id
        )
        await self.http.request(r, reason=reason)

    # Bans

    async def get_guild_bans(
        self, guild_id: Snowflake, options: Optional[Mapping[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        r = self.http.route('GET', '/guilds/{guild_id}/bans', guild_id=guild_id)
        return await self.http.request(r, params=options)

    async def get_guild_ban(self, guild_id: Snowflake, member_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('GET', '/guilds/{guild_id}/bans/{member_id}', guild_id=guild_id, member_id=member_id)
        return await self.http.request(r)

    async def create_guild_ban(
        self,
        guild_id: Snowflake,
        member_id: Snowflake,
        data: Optional[Mapping[str, Any]] = None,
        *,
        reason: Optional[str] = None,
    ) -> None:
        r = self.http.route('PUT', '/guilds/{guild_id}/bans/{member_id}', guild_id=guild_id, member_id=member_id)
        await self.http.request(r, json=dict(data) if data else None, reason=reason)

    async def remove_guild_ban(
        self, guild_id: Snowflake, member_id: Snowflake, *, reason: Optional[str] = None
    ) -> None:
        r = self.http.route(
            'DELETE', '/guilds/{guild_id}/bans/{member_id}', guild_id=guild_id, member_id=member_id
        )
        await self.http.request(r, reason=reason)

    # Roles

    async def get_guild_roles(self, guild_id: Snowflake) -> List[Dict[str, Any]]:
        r = self.http.route('GET', '/guilds/{guild_id}/roles', guild_id=guild_id)
        return await self.http.request(r)

    async def create_guild_role(
        self, guild_id: Snowflake, data: Optional[Mapping[str, Any]] = None, *, reason: Optional[str] = None
    ) -> Dict[str, Any]:
        r = self.http.route('POST', '/guilds/{guild_id}/roles', guild_id=guild_id)
        return await self.http.request(r, json=dict(data or {}), reason=reason)

    async def update_guild_role_positions(
        self, guild_id: Snowflake, data: Sequence[Mapping[str, Any]], *, reason: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        r = self.http.route('PATCH', '/guilds/{guild_id}/roles', guild_id=guild_id)
        return await self.http.request(r, json=[dict(d) for d in data], reason=reason)

    async def update_guild_role(
        self,
        guild_id: Snowflake,
        role_id: Snowflake,
        data: Mapping[str, Any],
        *,
        reason: Optional[str] = None,
    ) -> Dict[str, Any]:
        r = self.http.route('PATCH', '/guilds/{guild_id}/roles/{role_id}', guild_id=guild_id, role_id=role_id)
        return await self.http.request(r, json=dict(data), reason=reason)

    async def remove_guild_role(self, guild_id: Snowflake, role_id: Snowflake, *, reason: Optional[str] = None) -> None:
        r = self.http.route('DELETE', '/guilds/{guild_id}/roles/{role_id}', guild_id=guild_id, role_id=role_id)
        await self.http.request(r, reason=reason)

    # Prune

    async def get_guild_prune_count(
        self, guild_id: Snowflake, options: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        r = self.http.route('GET', '/guilds/{guild_id}/prune', guild_id=guild_id)
        return await self.http.request(r, params=options)

    async def start_guild_prune(
        self, guild_id: Snowflake, data: Optional[Mapping[str, Any]] = None, *, reason: Optional[str] = None
    ) -> Dict[str, Any]:
        r = self.http.route('POST', '/guilds/{guild_id}/prune', guild_id=guild_id)
        return await self.http.request(r, json=dict(data or {}), reason=reason)

    # Misc

    async def get_guild_voice_regions(self, guild_id: Snowflake) -> List[Dict[str, Any]]:
        r = self.http.route('GET', '/guilds/{guild_id}/regions', guild_id=guild_id)
        return await self.http.request(r)

    async def get_guild_invites(self, guild_id: Snowflake) -> List[Dict[str, Any]]:
        r = self.http.route('GET', '/guilds/{guild_id}/invites', guild_id=guild_id)
        return await self.http.request(r)

    async def get_guild_integrations(self, guild_id: Snowflake) -> List[Dict[str, Any]]:
        r = self.http.route('GET', '/guilds/{guild_id}/integrations', guild_id=guild_id)
        return await self.http.request(r)

    async def remove_guild_integration(
        self, guild_id: Snowflake, integration_id: Snowflake, *, reason: Optional[str] = None
    ) -> None:
        r = self.http.route(
            'DELETE',
            '/guilds/{guild_id}/integrations/{integration_id}',
            guild_id=guild_id,
            integration_id=integration_id,
        )
        await self.http.request(r, reason=reason)

    async def get_guild_widget_settings(self, guild_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('GET', '/guilds/{guild_id}/widget', guild_id=guild_id)
        return await self.http.request(r)

    async def update_guild_widget(
        self, guild_id: Snowflake, data: Mapping[str, Any], *, reason: Optional[str] = None
    ) -> Dict[str, Any]:
        r = self.http.route('PATCH', '/guilds/{guild_id}/widget', guild_id=guild_id)
        return await self.http.request(r, json=dict(data), reason=reason)

    async def get_guild_widget(self, guild_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('GET', '/guilds/{guild_id}/widget.json', guild_id=guild_id)
        return await self.http.request(r, auth=False)

    async def get_guild_widget_image(self, guild_id: Snowflake, style: str = 'shield') -> ClientResponse:
        """Gets the PNG widget image of a guild.

        The response is returned as-is. Its body has already been read, so
        ``await response.read()`` returns the image bytes.
        """
        r = self.http.route('GET', '/guilds/{guild_id}/widget.png', guild_id=guild_id)
        return await self.http.request(r, params={'style': style}, raw=True, auth=False)

    async def get_guild_vanity_url(self, guild_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('GET', '/guilds/{guild_id}/vanity-url', guild_id=guild_id)
        return await self.http.request(r)

    async def get_guild_welcome_screen(self, guild_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('GET', '/guilds/{guild_id}/welcome-screen', guild_id=guild_id)
        return await self.http.request(r)

    async def update_guild_welcome_screen(
        self, guild_id: Snowflake, data: Mapping[str, Any], *, reason: Optional[str] = None
    ) -> Dict[str, Any]:
        r = self.http.route('PATCH', '/guilds/{guild_id}/welcome-screen', guild_id=guild_id)
        return await self.http.request(r, json=dict(data), reason=reason)
