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

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Union

from ..http import encode_body, prepare_message_body

if TYPE_CHECKING:
    from ..http import HTTPClient, Route
    from ..mentions import AllowedMentions
    from ..types.snowflake import Snowflake

# fmt: off
__all__ = (
    'InteractionMethods',
)
# fmt: on


class InteractionMethods:
    """Methods for application commands and for answering interactions.

    Interaction responses and follow-ups are authenticated by the interaction
    token, so they never send the ``Authorization`` header.
    """

    def __init__(self, http: HTTPClient, *, allowed_mentions: Optional[AllowedMentions] = None) -> None:
        self.http: HTTPClient = http
        self.allowed_mentions: Optional[AllowedMentions] = allowed_mentions

    # Global commands

    async def get_application_commands(
        self, application_id: Snowflake, *, with_localizations: bool = False
    ) -> List[Dict[str, Any]]:
        r = self.http.route('GET', '/applications/{application_id}/commands', application_id=application_id)
        return await self.http.request(r, params={'with_localizations': with_localizations})

    async def create_application_command(self, application_id: Snowflake, data: Mapping[str, Any]) -> Dict[str, Any]:
        r = self.http.route('POST', '/applications/{application_id}/commands', application_id=application_id)
        return await self.http.request(r, json=dict(data))

    async def get_application_command(self, application_id: Snowflake, command_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route(
            'GET',
            '/applications/{application_id}/commands/{command_id}',
            application_id=application_id,
            command_id=command_id,
        )
        return await self.http.request(r)

    async def edit_application_command(
        self, application_id: Snowflake, command_id: Snowflake, data: Mapping[str, Any]
    ) -> Dict[str, Any]:
        r = self.http.route(
            'PATCH',
            '/applications/{application_id}/commands/{command_id}',
            application_id=application_id,
            command_id=command_id,
        )
        return await self.http.request(r, json=dict(data))

    async def delete_application_command(self, application_id: Snowflake, command_id: Snowflake) -> None:
        r = self.http.route(
            'DELETE',
            '/applications/{application_id}/commands/{command_id}',
            application_id=application_id,
            command_id=command_id,
        )
        await self.http.request(r)

    async def bulk_overwrite_application_commands(
        self, application_id: Snowflake, data: Sequence[Mapping[str, Any]]
    ) -> List[Dict[str, Any]]:
        r = self.http.route('PUT', '/applications/{application_id}/commands', application_id=application_id)
        return await self.http.request(r, json=[dict(d) for d in data])

    # Guild commands

    async def get_guild_application_commands(
        self, application_id: Snowflake, guild_id: Snowflake, *, with_localizations: bool = False
    ) -> List[Dict[str, Any]]:
        r = self.http.route(
            'GET',
            '/applications/{application_id}/guilds/{guild_id}/commands',
            application_id=application_id,
            guild_id=guild_id,
        )
        return await self.http.request(r, params={'with_localizations': with_localizations})

    async def create_guild_application_command(
        self, application_id: Snowflake, guild_id: Snowflake, data: Mapping[str, Any]
    ) -> Dict[str, Any]:
        r = self.http.route(
            'POST',
            '/applications/{application_id}/guilds/{guild_id}/commands',
            application_id=application_id,
            guild_id=guild_id,
        )
        return await self.http.request(r, json=dict(data))

    async def get_guild_application_command(
        self, application_id: Snowflake, guild_id: Snowflake, command_id: Snowflake
    ) -> Dict[str, Any]:
        r = self.http.route(
            'GET',
            '/applications/{application_id}/guilds/{guild_id}/commands/{command_id}',
            application_id=application_id,
            guild_id=guild_id,
            command_id=command_id,
        )
        return await self.http.request(r)

    async def edit_guild_application_command(
        self, application_id: Snowflake, guild_id: Snowflake, command_id: Snowflake, data: Mapping[str, Any]
    ) -> Dict[str, Any]:
        r = self.http.route(
            'PATCH',
            '/applications/{application_id}/guilds/{guild_id}/commands/{command_id}',
            application_id=application_id,
            guild_id=guild_id,
            command_id=command_id,
        )
        return await self.http.request(r, json=dict(data))

    async def delete_guild_application_command(
        self, application_id: Snowflake, guild_id: Snowflake, command_id: Snowflake
    ) -> None:
        r = self.http.route(
            'DELETE',
            '/applications/{application_id}/guilds/{guild_id}/commands/{command_id}',
            application_id=application_id,
            guild_id=guild_id,
            command_id=command_id,
        )
        await self.http.request(r)

    async def bulk_overwrite_guild_application_commands(
        self, application_id: Snowflake, guild_id: Snowflake, data: Sequence[Mapping[str, Any]]
    ) -> List[Dict[str, Any]]:
        r = self.http.route(
            'PUT',
            '/applications/{application_id}/guilds/{guild_id}/commands',
            application_id=application_id,
            guild_id=guild_id,
        )
        return await self.http.request(r, json=[dict(d) for d in data])

    async def get_guild_application_command_permissions(
        self, application_id: Snowflake, guild_id: Snowflake, command_id: Optional[Snowflake] = None
    ) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
        """Gets the permissions of one command, or of every command of the guild when ``command_id`` is not given."""
        if command_id is None:
            r = self.http.route(
                'GET',
                '/applications/{application_id}/guilds/{guild_id}/commands/permissions',
                application_id=application_id,
                guild_id=guild_id,
            )
        else:
            r = self.http.route(
                'GET',
                '/applications/{application_id}/guilds/{guild_id}/commands/{command_id}/permissions',
                application_id=application_id,
                guild_id=guild_id,
                command_id=command_id,
            )
        return await self.http.request(r)

    async def edit_guild_application_command_permissions(
        self,
        application_id: Snowflake,
        guild_id: Snowflake,
        command_id: Snowflake,
        permissions: Sequence[Mapping[str, Any]],
    ) -> Dict[str, Any]:
        r = self.http.route(
            'PUT',
            '/applications/{application_id}/guilds/{guild_id}/commands/{command_id}/permissions',
            application_id=application_id,
            guild_id=guild_id,
            command_id=command_id,
        )
        return await self.http.request(r, json={'permissions': [dict(p) for p in permissions]})

    # Responses

    async def create_interaction_response(
        self, interaction_id: Snowflake, token: str, data: Mapping[str, Any]
    ) -> None:
        """Answers an interaction.

        Files given at the top level of ``data`` are uploaded alongside the
        ``type`` and ``data`` fields of the callback.
        """
        r = self.http.route(
            'POST',
            '/interactions/{interaction_id}/{interaction_token}/callback',
            interaction_id=interaction_id,
            interaction_token=token,
        )
        with encode_body(data) as params:
            await self.http.request(r, json=params.payload, form=params.multipart, files=params.files, auth=False)

    def _followup_route(
        self, method: str, application_id: Snowflake, token: str, message_id: Optional[Snowflake] = None
    ) -> Route:
        # No message ID means the original response
        if message_id is None:
            return self.http.route(
                method,
                '/webhooks/{webhook_id}/{webhook_token}/messages/@original',
                webhook_id=application_id,
                webhook_token=token,
            )

        return self.http.route(
            method,
            '/webhooks/{webhook_id}/{webhook_token}/messages/{message_id}',
            webhook_id=application_id,
            webhook_token=token,
            message_id=message_id,
        )

    async def get_original_interaction_response(self, application_id: Snowflake, token: str) -> Dict[str, Any]:
        r = self._followup_route('GET', application_id, token)
        return await self.http.request(r, auth=False)

    async def edit_original_interaction_response(
        self, application_id: Snowflake, token: str, data: Union[str, Mapping[str, Any]]
    ) -> Dict[str, Any]:
        return await self.edit_followup_message(application_id, token, None, data)

    async def delete_original_interaction_response(self, application_id: Snowflake, token: str) -> None:
        await self.delete_followup_message(application_id, token, None)

    async def create_followup_message(
        self, application_id: Snowflake, token: str, data: Union[str, Mapping[str, Any]]
    ) -> Dict[str, Any]:
        body = prepare_message_body(data, allowed_mentions=self.allowed_mentions)
        r = self.http.route(
            'POST', '/webhooks/{webhook_id}/{webhook_token}', webhook_id=application_id, webhook_token=token
        )
        with encode_body(body) as params:
            return await self.http.request(
                r, json=params.payload, form=params.multipart, files=params.files, auth=False
            )

    async def get_followup_message(self, application_id: Snowflake, token: str, message_id: Snowflake) -> Dict[str, Any]:
        r = self._followup_route('GET', application_id, token, message_id)
        return await self.http.request(r, auth=False)

    async def edit_followup_message(
        self,
        application_id: Snowflake,
        token: str,
        message_id: Optional[Snowflake],
        data: Union[str, Mapping[str, Any]],
    ) -> Dict[str, Any]:
        body = prepare_message_body(data, allowed_mentions=self.allowed_mentions)
        r = self._followup_route('PATCH', application_id, token, message_id)
        with encode_body(body) as params:
            return await self.http.request(
                r, json=params.payload, form=params.multipart, files=params.files, auth=False
            )

    async def delete_followup_message(
        self, application_id: Snowflake, token: str, message_id: Optional[Snowflake]
    ) -> None:
        r = self._followup_route('DELETE', application_id, token, message_id)
        await self.http.request(r, auth=False)
