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

from ..constants import GET_AUDIT_LOG_MAX_RESULTS, GET_AUDIT_LOG_MIN_RESULTS

if TYPE_CHECKING:
    from ..http import HTTPClient
    from ..types.snowflake import Snowflake

# fmt: off
__all__ = (
    'AuditLogMethods',
)
# fmt: on


class AuditLogMethods:
    def __init__(self, http: HTTPClient) -> None:
        self.http: HTTPClient = http

    async def get_audit_log(self, guild_id: Snowflake, options: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Gets the audit log of a guild.

        Raises
        -------
        ValueError
            ``limit`` is not between 1 and 100.
        """
        limit = options.get('limit') if options else None
        if limit is not None and not (GET_AUDIT_LOG_MIN_RESULTS <= limit <= GET_AUDIT_LOG_MAX_RESULTS):
            raise ValueError(
                f'Amount of audit log entries that may be requested has to be between '
                f'{GET_AUDIT_LOG_MIN_RESULTS} and {GET_AUDIT_LOG_MAX_RESULTS}'
            )

        r = self.http.route('GET', '/guilds/{guild_id}/audit-logs', guild_id=guild_id)
        return await self.http.request(r, params=options)
