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

API_VERSION = 10
BASE_HOST = 'https://discord.com'
CDN_URL = 'https://cdn.discordapp.com'

GET_CHANNEL_MESSAGES_MIN_RESULTS = 1
GET_CHANNEL_MESSAGES_MAX_RESULTS = 100
GET_GUILD_MEMBERS_MIN_RESULTS = 1
GET_GUILD_MEMBERS_MAX_RESULTS = 1000
SEARCH_MEMBERS_MIN_RESULTS = 1
SEARCH_MEMBERS_MAX_RESULTS = 1000
GET_AUDIT_LOG_MIN_RESULTS = 1
GET_AUDIT_LOG_MAX_RESULTS = 100
BULK_DELETE_MESSAGES_MIN = 2
BULK_DELETE_MESSAGES_MAX = 100
# Messages older than this cannot be removed through the bulk delete endpoint
BULK_DELETE_MAX_AGE_DAYS = 14
ALLOWED_MENTIONS_MAX_IDS = 100

DEFAULT_RETRY_LIMIT = 3
DEFAULT_REQUEST_TIMEOUT = 15.0
