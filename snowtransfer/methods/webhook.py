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

from ..http import encode_body, prepare_message_body

if TYPE_CHECKING:
    from ..http import HTTPClient
    from ..mentions import AllowedMentions
    from ..types.snowflake import Snowflake

# fmt: off
__all__ = (
    'WebhookMethods',
)
# fmt: on

_EXECUTE_FIELDS = ('content', 'embeds', 'components', 'files', 'poll')


class WebhookMethods:
    """Methods for managing and executing webhooks.

    Requests that carry a webhook token are sent without the bot's
    ``Authorization`` header; the token in the URL authenticates them.
    """

    def __init__(
        self,
        http: HTTPClient,
        *,
        disable_everyone: bool = False,
        allowed_mentions: Optional[AllowedMentions] = None,
    ) -> None:
        self.http: HTTPClient = http
        self.disable_everyone: bool = disable_everyone
        self.allowed_mentions: Optional[AllowedMentions] = allowed_mentions

    async def create_webhook(
        self, channel_id: Snowflake, data: Mapping[str, Any], *, reason: Optional[str] = None
    ) -> Dict[str, Any]:
        r = self.http.route('POST', '/channels/{channel_id}/webhooks', channel_id=channel_id)
        return await self.http.request(r, json=dict(data), reason=reason)

    async def get_channel_webhooks(self, channel_id: Snowflake) -> List[Dict[str, Any]]:
        r = self.http.route('GET', '/channels/{channel_id}/webhooks', channel_id=channel_id)
        return await self.http.request(r)

    async def get_guild_webhooks(self, guild_id: Snowflake) -> List[Dict[str, Any]]:
        r = self.http.route('GET', '/guilds/{guild_id}/webhooks', guild_id=guild_id)
        return await self.http.request(r)

    async def get_webhook(self, webhook_id: Snowflake, token: Optional[str] = None) -> Dict[str, Any]:
        if token:
            r = self.http.route(
                'GET', '/webhooks/{webhook_id}/{webhook_token}', webhook_id=webhook_id, webhook_token=token
            )
            return await self.http.request(r, auth=False)

        r = self.http.route('GET', '/webhooks/{webhook_id}', webhook_id=webhook_id)
        return await self.http.request(r)

    async def update_webhook(
        self,
        webhook_id: Snowflake,
        data: Mapping[str, Any],
        token: Optional[str] = None,
        *,
        reason: Optional[str] = None,
    ) -> Dict[str, Any]:
        if token:
            r = self.http.route(
                'PATCH', '/webhooks/{webhook_id}/{webhook_token}', webhook_id=webhook_id, webhook_token=token
            )
            return await self.http.request(r, json=dict(data), reason=reason, auth=False)

        r = self.http.route('PATCH', '/webhooks/{webhook_id}', webhook_id=webhook_id)
        return await self.http.request(r, json=dict(data), reason=reason)

    async def delete_webhook(
        self, webhook_id: Snowflake, token: Optional[str] = None, *, reason: Optional[str] = None
    ) -> None:
        if token:
            r = self.http.route(
                'DELETE', '/webhooks/{webhook_id}/{webhook_token}', webhook_id=webhook_id, webhook_token=token
            )
            await self.http.request(r, reason=reason, auth=False)
        else:
            r = self.http.route('DELETE', '/webhooks/{webhook_id}', webhook_id=webhook_id)
            await self.http.request(r, reason=reason)

    async def execute_webhook(
        self,
        webhook_id: Snowflake,
        token: str,
        data: Union[str, Mapping[str, Any]],
        options: Optional[Mapping[str, Any]] = None,
        *,
        disable_everyone: Optional[bool] = None,
    ) -> Optional[Dict[str, Any]]:
        """Sends a message through a webhook.

        Pass ``{'wait': True}`` as ``options`` to get the created message back.

        Raises
        -------
        ValueError
            The message has no content, embeds, components, files or poll.
        """
        if not isinstance(data, str) and not any(data.get(field) for field in _EXECUTE_FIELDS):
            raise ValueError('Missing content, embeds, components, files, or poll')

        body = prepare_message_body(
            data,
            allowed_mentions=self.allowed_mentions,
            disable_everyone=self.disable_everyone if disable_everyone is None else disable_everyone,
        )
        r = self.http.route(
            'POST', '/webhooks/{webhook_id}/{webhook_token}', webhook_id=webhook_id, webhook_token=token
        )
        with encode_body(body) as params:
            result = await self.http.request(
                r, params=options, json=params.payload, form=params.multipart, files=params.files, auth=False
            )
        return result or None

    async def execute_webhook_slack(
        self, webhook_id: Snowflake, token: str, data: Mapping[str, Any], options: Optional[Mapping[str, Any]] = None
    ) -> Any:
        r = self.http.route(
            'POST', '/webhooks/{webhook_id}/{webhook_token}/slack', webhook_id=webhook_id, webhook_token=token
        )
        return await self.http.request(r, params=options, json=dict(data), auth=False)

    async def execute_webhook_github(
        self, webhook_id: Snowflake, token: str, data: Mapping[str, Any], options: Optional[Mapping[str, Any]] = None
    ) -> Any:
        r = self.http.route(
            'POST', '/webhooks/{webhook_id}/{webhook_token}/github', webhook_id=webhook_id, webhook_token=token
        )
        return await self.http.request(r, params=options, json=dict(data), auth=False)

    async def get_webhook_message(
        self, webhook_id: Snowflake, token: str, message_id: Snowflake, *, thread_id: Optional[Snowflake] = None
    ) -> Dict[str, Any]:
        r = self.http.route(
            'GET',
            '/webhooks/{webhook_id}/{webhook_token}/messages/{message_id}',
            webhook_id=webhook_id,
            webhook_token=token,
            message_id=message_id,
        )
        return await self.http.request(r, params={'thread_id': thread_id}, auth=False)

    async def edit_webhook_message(
        self,
        webhook_id: Snowflake,
        token: str,
        message_id: Snowflake,
        data: Union[str, Mapping[str, Any]],
        *,
        thread_id: Optional[Snowflake] = None,
        disable_everyone: Optional[bool] = None,
    ) -> Dict[str, Any]:
        body = prepare_message_body(
            data,
            allowed_mentions=self.allowed_mentions,
            disable_everyone=self.disable_everyone if disable_everyone is None else disable_everyone,
        )
        r = self.http.route(
            'PATCH',
            '/webhooks/{webhook_id}/{webhook_token}/messages/{message_id}',
            webhook_id=webhook_id,
            webhook_token=token,
            message_id=message_id,
        )
        with encode_body(body) as params:
            return await self.http.request(
                r,
                params={'thread_id': thread_id},
                json=params.payload,
                form=params.multipart,
                files=params.files,
                auth=False,
            )

    async def delete_webhook_message(
        self, webhook_id: Snowflake, token: str, message_id: Snowflake, *, thread_id: Optional[Snowflake] = None
    ) -> None:
        r = self.http.route(
            'DELETE',
            '/webhooks/{webhook_id}/{webhook_token}/messages/{message_id}',
            webhook_id=webhook_id,
            webhook_token=token,
            message_id=message_id,
        )
        await self.http.request(r, params={'thread_id': thread_id}, auth=False)
