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

import datetime
import io
import logging
import typing

import pytest

from snowtransfer import utils


@pytest.mark.parametrize(
    ('snowflake', 'time_tuple'),
    [
        (10000000000000000, (2015, 1, 28, 14, 16, 25)),
        (12345678901234567, (2015, 2, 4, 1, 37, 19)),
        (100000000000000000, (2015, 10, 3, 22, 44, 17)),
        (123456789012345678, (2015, 12, 7, 16, 13, 12)),
        (661720302316814366, (2020, 1, 1, 0, 0, 14)),
        (1000000000000000000, (2022, 7, 22, 11, 22, 59)),
    ],
)
def test_snowflake_time(snowflake: int, time_tuple: typing.Tuple[int, int, int, int, int, int]):
    dt = utils.snowflake_time(snowflake)

    assert (dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second) == time_tuple

    assert utils.time_snowflake(dt, high=False) <= snowflake <= utils.time_snowflake(dt, high=True)


@pytest.mark.parametrize(
    ('text', 'expected'),
    [
        ('@everyone', '@\u200beveryone'),
        ('hello @here!', 'hello @\u200bhere!'),
        ('@someone else', '@\u200bsomeone else'),
        ('<@80088516616269824>', '<@80088516616269824>'),
        ('<@!80088516616269824>', '<@!80088516616269824>'),
        ('<@&381978264336400385>', '<@&381978264336400385>'),
        ('no mentions here', 'no mentions here'),
    ],
)
def test_replace_everyone(text: str, expected: str):
    assert utils.replace_everyone(text) == expected


def test_to_query():
    query = utils._to_query({'with_counts': True, 'with_expiration': False, 'limit': 50, 'after': None, 'q': 123})
    assert query == {'with_counts': 'true', 'with_expiration': 'false', 'limit': 50, 'q': 123}

    assert utils._to_query(None) == {}
    assert utils._to_query({}) == {}
    assert utils._to_query({'around': 12345678901234567, 'name': 'general'}) == {
        'around': 12345678901234567,
        'name': 'general',
    }


def test_parse_ratelimit_header_reset_after():
    headers = {'X-Ratelimit-Reset-After': '1.25', 'X-Ratelimit-Reset': '0'}
    assert utils._parse_ratelimit_header(headers) == 1.25


def test_parse_ratelimit_header_clock():
    reset = utils.utcnow() + datetime.timedelta(seconds=10)
    headers = {'X-Ratelimit-Reset-After': '1.25', 'X-Ratelimit-Reset': str(reset.timestamp())}

    delta = utils._parse_ratelimit_header(headers, use_clock=True)
    assert 8.0 < delta <= 10.0

    # Without the reset timestamp the relative value is used even with the clock
    assert utils._parse_ratelimit_header({'X-Ratelimit-Reset-After': '2'}, use_clock=True) == 2.0


def test_parse_ratelimit_header_reset_in_the_past():
    reset = utils.utcnow() - datetime.timedelta(seconds=10)
    headers = {'X-Ratelimit-Reset': str(reset.timestamp())}
    assert utils._parse_ratelimit_header(headers) == 0.0


@pytest.mark.parametrize(
    ('data', 'mime'),
    [
        (b'\x89\x50\x4e\x47\x0d\x0a\x1a\x0a' + b'\x00' * 8, 'image/png'),
        (b'\xff\xd8\xff\xe0' + b'\x00' * 8, 'image/jpeg'),
        (b'GIF89a' + b'\x00' * 8, 'image/gif'),
        (b'RIFF\x00\x00\x00\x00WEBP', 'image/webp'),
    ],
)
def test_get_mime_type_for_image(data: bytes, mime: str):
    assert utils._get_mime_type_for_image(data) == mime
    assert utils._bytes_to_base64_data(data).startswith(f'data:{mime};base64,')


def test_get_mime_type_for_unknown_data():
    with pytest.raises(ValueError):
        utils._get_mime_type_for_image(b'not an image')

    assert utils._get_mime_type_for_image(b'not an image', fallback=True) == 'application/octet-stream'


def test_json_round_trip_is_compact():
    assert utils._to_json({'a': [1, 2], 'b': None}) == '{"a":[1,2],"b":null}'
    assert utils._from_json('{"a":[1,2]}') == {'a': [1, 2]}


def test_setup_logging():
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    logger = logging.getLogger('snowtransfer')

    formatter = logging.Formatter('%(name)s: %(message)s')

    utils.setup_logging(handler=handler, formatter=formatter, level=logging.DEBUG, root=False)
    try:
        assert logger.level == logging.DEBUG
        assert handler.formatter is formatter

        logging.getLogger('snowtransfer.http').debug('hello %s', 'world')
        assert 'snowtransfer.http: hello world' in stream.getvalue()
    finally:
        logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
