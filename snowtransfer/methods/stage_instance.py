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

from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

if TYPE_CHECKING:
    from ..http import HTTPClient
    from ..types.snowflake import Snowflake

# fmt: off
__all__ = (
    'StageInstanceMethods',
)
# fmt: on


class StageInstanceMethods:
    def __init__(self, http: HTTPClient) -> None:
        self.http: HTTPClient = http

    async def create_stage_instance(self, data: Mapping[str, Any], *, reason: Optional[str] = None) -> Dict[str, Any]:
        r = self.http.route('POST', '/stage-instances')
        return await self.http.request(r, json=dict(data), reason=reason)

    async def get_stage_instance(self, channel_id: Snowflake) -> Dict[str, Any]:
        r = self.http.route('GET', '/stage-instances/{channel_id}', channel_id=channel_id)
        return await self.http.request(r)

    async def edit_stage_instance(
        self, channel_id: Snowflake, data: Mapping[str, Any], *, reason: Optional[str] = None
    ) -> Dict[str, Any]:
        r = self.http.route('PATCH', '/stage-instances/{channel_id}', channel_id=channel_id)
        return await self.http.request(r, json=dict(data), reason=reason)

    async def delete_stage_instance(self, channel_id: Snowflake, *, reason: Optional[str] = None) -> None:
        r = self.http.route('DELETE', '/stage-instances/{channel_id}', channel_id=channel_id)
        await self.http.request(r, reason=reason)
