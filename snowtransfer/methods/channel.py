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

import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Union

from .. import utils
from ..constants import (
    BULK_DELETE_MAX_AGE_DAYS,
    BULK_DELETE_MESSAGES_MAX,
    BULK_DELETE_MESSAGES_MIN,
    GET_CHANNEL_MESSAGES_MAX_RESULTS,
    GET_CHANNEL_MESSAGES_MIN_RESULTS,
)
from ..http import encode_body, prepare_message_body

if TYPE_CHECKING:
    from ..http import HTTPClient
    from ..mentions import AllowedMentions
    from ..types.snowflake import Snowflake, SnowflakeList

# fmt: off
__all__ = (
    'ChannelMethods',
)
# fmt: on

_MESSAGE_FIELDS = ('content', 'embeds', 'sticker_ids', 'components', 'files', 'poll')


class ChannelMethods:
    """Methods for interacting with channels, their messages and their threads.

    Message bodies may be given as a plain :class:`str`, which is shorthand for
    ``{'content': ...}``. A body with a ``files`` list is uploaded as a
    multipart form, every file being a :class:`~snowtransfer.File` or a
    ``{'name': ..., 'file': ...}`` mapping.
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

    # Channels

    async def get_channel(self, channel_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('GET', '/channels/{channel_id}', channel_id=channel_id)
        return await self.http.request(r)

    async def update_channel(
        self, channel_id: Snowflake, data: Mapping[str, Any], *, reason: Optional[str] = None
    ) -> Dict[str, Any]:
        r = self.http.route('PATCH', '/channels/{channel_id}', channel_id=channel_id)
        return await self.http.request(r, json=dict(data), reason=reason)

    async def delete_channel(self, channel_id: Snowflake, *, reason: Optional[str] = None) -> Dict[str, Any]:
        r = self.http.route('DELETE', '/channels/{channel_id}', channel_id=channel_id)
        return await self.http.request(r, reason=reason)

    # Messages

    async def get_channel_messages(
        self, channel_id: Snowflake, options: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Gets the messages of a channel.

        Only one of ``around``, ``before`` and ``after`` is sent. ``around``
        wins over ``before``, which wins over ``after``; the keys that lose
        are removed from ``options``.

        Parameters
        -----------
        channel_id: Union[:class:`int`, :class:`str`]
            The ID of the channel.
        options: Optional[:class:`dict`]
            The query, defaults to ``{'limit': 50}``.

        Raises
        -------
        ValueError
            ``limit`` is not between 1 and 100.
        """
        if options is None:
            options = {'limit': 50}

        if options.get('around'):
            options.pop('before', None)
            options.pop('after', None)
        elif options.get('before'):
            options.pop('around', None)
            options.pop('after', None)
        elif options.get('after'):
            options.pop('around', None)
            options.pop('before', None)

        limit = options.get('limit')
        if limit is not None and not (GET_CHANNEL_MESSAGES_MIN_RESULTS <= limit <= GET_CHANNEL_MESSAGES_MAX_RESULTS):
            raise ValueError(
                f'Amount of messages that may be requested has to be between '
                f'{GET_CHANNEL_MESSAGES_MIN_RESULTS} and {GET_CHANNEL_MESSAGES_MAX_RESULTS}'
            )

        r = self.http.route('GET', '/channels/{channel_id}/messages', channel_id=channel_id)
        return await self.http.request(r, params=options)

    async def get_channel_message(self, channel_id: Snowflake, message_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route(
            'GET', '/channels/{channel_id}/messages/{message_id}', channel_id=channel_id, message_id=message_id
        )
        return await self.http.request(r)

    def _prepare(self, data: Union[str, Mapping[str, Any]], disable_everyone: Optional[bool]) -> Dict[str, Any]:
        return prepare_message_body(
            data,
            allowed_mentions=self.allowed_mentions,
            disable_everyone=self.disable_everyone if disable_everyone is None else disable_everyone,
        )

    async def create_message(
        self,
        channel_id: Snowflake,
        data: Union[str, Mapping[str, Any]],
        *,
        disable_everyone: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """Creates a message in a channel.

        Raises
        -------
        ValueError
            The message has no content, embeds, sticker_ids, components, files or poll.
        """
        if not isinstance(data, str) and not any(data.get(field) for field in _MESSAGE_FIELDS):
            raise ValueError('Missing content, embeds, sticker_ids, components, files, or poll')

        body = self._prepare(data, disable_everyone)
        r = self.http.route('POST', '/channels/{channel_id}/messages', channel_id=channel_id)
        with encode_body(body) as params:
            return await self.http.request(r, json=params.payload, form=params.multipart, files=params.files)

    async def edit_message(
        self,
        channel_id: Snowflake,
        message_id: Snowflake,
        data: Union[str, Mapping[str, Any]],
        *,
        disable_everyone: Optional[bool] = None,
    ) -> Dict[str, Any]:
        body = self._prepare(data, disable_everyone)
        r = self.http.route(
            'PATCH', '/channels/{channel_id}/messages/{message_id}', channel_id=channel_id, message_id=message_id
        )
        with encode_body(body) as params:
            return await self.http.request(r, json=params.payload, form=params.multipart, files=params.files)

    async def crosspost_message(self, channel_id: Snowflake, message_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route(
            'POST',
            '/channels/{channel_id}/messages/{message_id}/crosspost',
            channel_id=channel_id,
            message_id=message_id,
        )
        return await self.http.request(r)

    async def delete_message(
        self, channel_id: Snowflake, message_id: Snowflake, *, reason: Optional[str] = None
    ) -> None:
        r = self.http.route(
            'DELETE', '/channels/{channel_id}/messages/{message_id}', channel_id=channel_id, message_id=message_id
        )
        await self.http.request(r, reason=reason)

    async def bulk_delete_messages(
        self, channel_id: Snowflake, messages: SnowflakeList, *, reason: Optional[str] = None
    ) -> None:
        """Deletes between 2 and 100 messages at once.

        Messages older than two weeks cannot be deleted this way.

        Raises
        -------
        ValueError
            Too few or too many messages were given, or one of them is too old.
        """
        if not (BULK_DELETE_MESSAGES_MIN <= len(messages) <= BULK_DELETE_MESSAGES_MAX):
            raise ValueError(
                f'Amount of messages to be deleted has to be between '
                f'{BULK_DELETE_MESSAGES_MIN} and {BULK_DELETE_MESSAGES_MAX}'
            )

        oldest = utils.utcnow() - datetime.timedelta(days=BULK_DELETE_MAX_AGE_DAYS)
        for message_id in messages:
            if utils.snowflake_time(int(message_id)) < oldest:
                raise ValueError(
                    f'The message {message_id} is older than 2 weeks and may not be deleted using the bulk delete endpoint'
                )

        r = self.http.route('POST', '/channels/{channel_id}/messages/bulk-delete', channel_id=channel_id)
        await self.http.request(r, json={'messages': [str(m) for m in messages]}, reason=reason)

    # Reactions

    async def create_reaction(self, channel_id: Snowflake, message_id: Snowflake, emoji: str) -> None:
        r = self.http.route(
            'PUT',
            '/channels/{channel_id}/messages/{message_id}/reactions/{emoji}/@me',
            channel_id=channel_id,
            message_id=message_id,
            emoji=emoji,
        )
        await self.http.request(r)

    async def delete_reaction_self(self, channel_id: Snowflake, message_id: Snowflake, emoji: str) -> None:
        r = self.http.route(
            'DELETE',
            '/channels/{channel_id}/messages/{message_id}/reactions/{emoji}/@me',
            channel_id=channel_id,
            message_id=message_id,
            emoji=emoji,
        )
        await self.http.request(r)

    async def delete_reaction(
        self, channel_id: Snowflake, message_id: Snowflake, emoji: str, user_id: Optional[Snowflake] = None
    ) -> None:
        """Removes a user's reaction, or every reaction of an emoji when ``user_id`` is not given."""
        if user_id is None:
            r = self.http.route(
                'DELETE',
                '/channels/{channel_id}/messages/{message_id}/reactions/{emoji}',
                channel_id=channel_id,
                message_id=message_id,
                emoji=emoji,
            )
        else:
            r = self.http.route(
                'DELETE',
                '/channels/{channel_id}/messages/{message_id}/reactions/{emoji}/{user_id}',
                channel_id=channel_id,
                message_id=message_id,
                emoji=emoji,
                user_id=user_id,
            )
        await self.http.request(r)

    async def get_reactions(
        self,
        channel_id: Snowflake,
        message_id: Snowflake,
        emoji: str,
        options: Optional[Mapping[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        r = self.http.route(
            'GET',
            '/channels/{channel_id}/messages/{message_id}/reactions/{emoji}',
            channel_id=channel_id,
            message_id=message_id,
            emoji=emoji,
        )
        return await self.http.request(r, params=options)

    async def delete_all_reactions(self, channel_id: Snowflake, message_id: Snowflake) -> None:
        r = self.http.route(
            'DELETE',
            '/channels/{channel_id}/messages/{message_id}/reactions',
            channel_id=channel_id,
            message_id=message_id,
        )
        await self.http.request(r)

    # Permissions and invites

    async def edit_channel_permission(
        self,
        channel_id: Snowflake,
        permission_id: Snowflake,
        data: Mapping[str, Any],
        *,
        reason: Optional[str] = None,
    ) -> None:
        r = self.http.route(
            'PUT',
            '/channels/{channel_id}/permissions/{permission_id}',
            channel_id=channel_id,
            permission_id=permission_id,
        )
        await self.http.request(r, json=dict(data), reason=reason)

    async def delete_channel_permission(
        self, channel_id: Snowflake, permission_id: Snowflake, *, reason: Optional[str] = None
    ) -> None:
        r = self.http.route(
            'DELETE',
            '/channels/{channel_id}/permissions/{permission_id}',
            channel_id=channel_id,
            permission_id=permission_id,
        )
        await self.http.request(r, reason=reason)

    async def get_channel_invites(self, channel_id: Snowflake) -> List[Dict[str, Any]]:
        r = self.http.route('GET', '/channels/{channel_id}/invites', channel_id=channel_id)
        return await self.http.request(r)

    async def create_channel_invite(
        self,
        channel_id: Snowflake,
        data: Optional[Mapping[str, Any]] = None,
        *,
        reason: Optional[str] = None,
    ) -> Dict[str, Any]:
        if data is None:
            data = {'max_age': 86400, 'max_uses': 0, 'temporary': False, 'unique': False}
        r = self.http.route('POST', '/channels/{channel_id}/invites', channel_id=channel_id)
        return await self.http.request(r, json=dict(data), reason=reason)

    async def follow_announcement_channel(self, channel_id: Snowflake, webhook_channel_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('POST', '/channels/{channel_id}/followers', channel_id=channel_id)
        return await self.http.request(r, json={'webhook_channel_id': str(webhook_channel_id)})

    async def start_channel_typing(self, channel_id: Snowflake) -> None:
        r = self.http.route('POST', '/channels/{channel_id}/typing', channel_id=channel_id)
        await self.http.request(r)

    # Pins

    async def get_channel_pinned_messages(self, channel_id: Snowflake) -> List[Dict[str, Any]]:
        r = self.http.route('GET', '/channels/{channel_id}/pins', channel_id=channel_id)
        return await self.http.request(r)

    async def add_channel_pinned_message(
        self, channel_id: Snowflake, message_id: Snowflake, *, reason: Optional[str] = None
    ) -> None:
        r = self.http.route(
            'PUT', '/channels/{channel_id}/pins/{message_id}', channel_id=channel_id, message_id=message_id
        )
        await self.http.request(r, reason=reason)

    async def remove_channel_pinned_message(
        self, channel_id: Snowflake, message_id: Snowflake, *, reason: Optional[str] = None
    ) -> None:
        r = self.http.route(
            'DELETE', '/channels/{channel_id}/pins/{message_id}', channel_id=channel_id, message_id=message_id
        )
        await self.http.request(r, reason=reason)

    # Threads

    async def create_thread_with_message(
        self,
        channel_id: Snowflake,
        message_id: Snowflake,
        data: Mapping[str, Any],
        *,
        reason: Optional[str] = None,
    ) -> Dict[str, Any]:
        r = self.http.route(
            'POST',
            '/channels/{channel_id}/messages/{message_id}/threads',
            channel_id=channel_id,
            message_id=message_id,
        )
        return await self.http.request(r, json=dict(data), reason=reason)

    async def create_thread_without_message(
        self, channel_id: Snowflake, data: Mapping[str, Any], *, reason: Optional[str] = None
    ) -> Dict[str, Any]:
        r = self.http.route('POST', '/channels/{channel_id}/threads', channel_id=channel_id)
        return await self.http.request(r, json=dict(data), reason=reason)

    async def join_thread(self, thread_id: Snowflake) -> None:
        r = self.http.route('PUT', '/channels/{channel_id}/thread-members/@me', channel_id=thread_id)
        await self.http.request(r)

    async def add_thread_member(self, thread_id: Snowflake, user_id: Snowflake) -> None:
        r = self.http.route(
            'PUT', '/channels/{channel_id}/thread-members/{user_id}', channel_id=thread_id, user_id=user_id
        )
        await self.http.request(r)

    async def leave_thread(self, thread_id: Snowflake) -> None:
        r = self.http.route('DELETE', '/channels/{channel_id}/thread-members/@me', channel_id=thread_id)
        await self.http.request(r)

    async def remove_thread_member(self, thread_id: Snowflake, user_id: Snowflake) -> None:
        r = self.http.route(
            'DELETE', '/channels/{channel_id}/thread-members/{user_id}', channel_id=thread_id, user_id=user_id
        )
        await self.http.request(r)

    async def get_thread_member(
        self, thread_id: Snowflake, user_id: Snowflake, *, with_member: bool = False
    ) -> Dict[str, Any]:
        r = self.http.route(
            'GET', '/channels/{channel_id}/thread-members/{user_id}', channel_id=thread_id, user_id=user_id
        )
        return await self.http.request(r, params={'with_member': with_member})

    async def get_thread_members(
        self, thread_id: Snowflake, options: Optional[Mapping[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        r = self.http.route('GET', '/channels/{channel_id}/thread-members', channel_id=thread_id)
        return await self.http.request(r, params=options)

    async def get_channel_archived_public_threads(
        self, channel_id: Snowflake, options: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        r = self.http.route('GET', '/channels/{channel_id}/threads/archived/public', channel_id=channel_id)
        return await self.http.request(r, params=options)

    async def get_channel_archived_private_threads(
        self, channel_id: Snowflake, options: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        r = self.http.route('GET', '/channels/{channel_id}/threads/archived/private', channel_id=channel_id)
        return await self.http.request(r, params=options)

    async def get_channel_archived_private_threads_user(
        self, channel_id: Snowflake, options: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        r = self.http.route(
            'GET', '/channels/{channel_id}/users/@me/threads/archived/private', channel_id=channel_id
        )
        return await self.http.request(r, params=options)

    # Direct messages

    async def add_dm_channel_recipient(
        self, channel_id: Snowflake, user_id: Snowflake, data: Mapping[str, Any]
    ) -> None:
        r = self.http.route(
            'PUT', '/channels/{channel_id}/recipients/{user_id}', channel_id=channel_id, user_id=user_id
        )
        await self.http.request(r, json=dict(data))

    async def remove_dm_channel_recipient(self, channel_id: Snowflake, user_id: Snowflake) -> None:
        r = self.http.route(
            'DELETE', '/channels/{channel_id}/recipients/{user_id}', channel_id=channel_id, user_id=user_id
        )
        await self.http.request(r)

    async def refresh_attachment_urls(self, attachments: Union[str, Sequence[str]]) -> Dict[str, Any]:
        if isinstance(attachments, str):
            attachments = [attachments]
        r = self.http.route('POST', '/attachments/refresh-urls')
        return await self.http.request(r, json={'attachment_urls': list(attachments)})
