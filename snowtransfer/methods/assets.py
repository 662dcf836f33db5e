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

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

from .. import utils
from ..file import File

if TYPE_CHECKING:
    from ..http import HTTPClient
    from ..types.snowflake import Snowflake

# fmt: off
__all__ = (
    'GuildAssetsMethods',
)
# fmt: on


class GuildAssetsMethods:
    """Methods for guild emojis and stickers."""

    def __init__(self, http: HTTPClient) -> None:
        self.http: HTTPClient = http

    # Emojis

    async def get_emojis(self, guild_id: Snowflake) -> List[Dict[str, Any]]:
        r = self.http.route('GET', '/guilds/{guild_id}/emojis', guild_id=guild_id)
        return await self.http.request(r)

    async def get_emoji(self, guild_id: Snowflake, emoji_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('GET', '/guilds/{guild_id}/emojis/{emoji_id}', guild_id=guild_id, emoji_id=emoji_id)
        return await self.http.request(r)

    async def create_emoji(
        self, guild_id: Snowflake, data: Mapping[str, Any], *, reason: Optional[str] = None
    ) -> Dict[str, Any]:
        """Creates a custom emoji.

        ``image`` may be raw :class:`bytes`, in which case it is sent as a data URI.
        """
        payload = dict(data)
        if isinstance(payload.get('image'), bytes):
            payload['image'] = utils._bytes_to_base64_data(payload['image'])

        r = self.http.route('POST', '/guilds/{guild_id}/emojis', guild_id=guild_id)
        return await self.http.request(r, json=payload, reason=reason)

    async def update_emoji(
        self, guild_id: Snowflake, emoji_id: Snowflake, data: Mapping[str, Any], *, reason: Optional[str] = None
    ) -> Dict[str, Any]:
        r = self.http.route('PATCH', '/guilds/{guild_id}/emojis/{emoji_id}', guild_id=guild_id, emoji_id=emoji_id)
        return await self.http.request(r, json=dict(data), reason=reason)

    async def delete_emoji(self, guild_id: Snowflake, emoji_id: Snowflake, *, reason: Optional[str] = None) -> None:
        r = self.http.route('DELETE', '/guilds/{guild_id}/emojis/{emoji_id}', guild_id=guild_id, emoji_id=emoji_id)
        await self.http.request(r, reason=reason)

    # Stickers

    async def get_sticker(self, sticker_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('GET', '/stickers/{sticker_id}', sticker_id=sticker_id)
        return await self.http.request(r)

    async def get_guild_stickers(self, guild_id: Snowflake) -> List[Dict[str, Any]]:
        r = self.http.route('GET', '/guilds/{guild_id}/stickers', guild_id=guild_id)
        return await self.http.request(r)

    async def get_guild_sticker(self, guild_id: Snowflake, sticker_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route(
            'GET', '/guilds/{guild_id}/stickers/{sticker_id}', guild_id=guild_id, sticker_id=sticker_id
        )
        return await self.http.request(r)

    async def create_guild_sticker(
        self,
        guild_id: Snowflake,
        data: Mapping[str, Any],
        file: Union[File, Mapping[str, Any]],
        *,
        reason: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Uploads a sticker.

        Unlike messages, the sticker fields are sent as plain form fields next
        to the ``file`` part rather than in ``payload_json``.
        """
        sticker = File.from_payload(file)
        initial_bytes = sticker.fp.read(16)

        try:
            mime_type = utils._get_mime_type_for_image(initial_bytes)
        except ValueError:
            if initial_bytes.startswith(b'{'):
                mime_type = 'application/json'
            else:
                mime_type = 'application/octet-stream'
        finally:
            sticker.reset()

        form: List[Dict[str, Any]] = [
            {
                'name': 'file',
                'value': sticker.fp,
                'filename': sticker.filename,
                'content_type': mime_type,
            }
        ]

        for k, v in data.items():
            form.append(
                {
                    'name': k,
                    'value': v,
                }
            )

        r = self.http.route('POST', '/guilds/{guild_id}/stickers', guild_id=guild_id)
        try:
            return await self.http.request(r, form=form, files=[sticker], reason=reason)
        finally:
            sticker.close()

    async def update_guild_sticker(
        self, guild_id: Snowflake, sticker_id: Snowflake, data: Mapping[str, Any], *, reason: Optional[str] = None
    ) -> Dict[str, Any]:
        r = self.http.route(
            'PATCH', '/guilds/{guild_id}/stickers/{sticker_id}', guild_id=guild_id, sticker_id=sticker_id
        )
        return await self.http.request(r, json=dict(data), reason=reason)

    async def delete_guild_sticker(
        self, guild_id: Snowflake, sticker_id: Snowflake, *, reason: Optional[str] = None
    ) -> None:
        r = self.http.route(
            'DELETE', '/guilds/{guild_id}/stickers/{sticker_id}', guild_id=guild_id, sticker_id=sticker_id
        )
        await self.http.request(r, reason=reason)
