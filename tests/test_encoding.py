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

from io import BytesIO
import json

import pytest

from snowtransfer import AllowedMentions, File
from snowtransfer.http import encode_body, prepare_message_body


def test_encode_json_body():
    body = {'content': 'hello', 'tts': False}
    params = encode_body(body)

    assert params.payload == body
    assert params.payload is not body
    assert params.multipart is None
    assert params.files is None


def test_encode_nothing():
    params = encode_body(None)
    assert params == (None, None, None)


def test_encode_empty_files_is_json():
    body = {'content': 'hello', 'files': []}
    params = encode_body(body)

    assert params.payload == {'content': 'hello'}
    assert params.multipart is None
    assert 'files' in body


def test_encode_multipart_body():
    body = {
        'content': 'hello',
        'files': [
            {'name': 'a.txt', 'file': b'a'},
            File(BytesIO(b'b'), 'b.txt'),
        ],
    }
    original = dict(body)

    with encode_body(body) as params:
        assert params.payload is None
        assert params.files is not None
        assert [f.filename for f in params.files] == ['a.txt', 'b.txt']

        multipart = params.multipart
        assert multipart is not None
        assert [part['name'] for part in multipart] == ['payload_json', 'files[0]', 'files[1]']
        assert json.loads(multipart[0]['value']) == {'content': 'hello'}
        assert multipart[1]['filename'] == 'a.txt'
        assert multipart[1]['content_type'] == 'application/octet-stream'
        assert multipart[2]['value'].read() == b'b'

    # The caller's mapping is left alone
    assert body == original


def test_encode_attachment_descriptions():
    body = {'files': [{'name': 'a.png', 'file': b'a', 'description': 'first'}, {'name': 'b.png', 'file': b'b'}]}
    with encode_body(body) as params:
        assert params.multipart is not None
        payload = json.loads(params.multipart[0]['value'])

    assert payload == {
        'attachments': [
            {'id': 0, 'filename': 'a.png', 'description': 'first'},
            {'id': 1, 'filename': 'b.png'},
        ]
    }


def test_encode_keeps_explicit_attachments():
    attachments = [{'id': 0, 'description': 'mine'}]
    body = {'attachments': attachments, 'files': [{'name': 'a.png', 'file': b'a', 'description': 'ignored'}]}
    with encode_body(body) as params:
        assert params.multipart is not None
        payload = json.loads(params.multipart[0]['value'])

    assert payload == {'attachments': attachments}


def test_encode_invalid_file():
    with pytest.raises(TypeError):
        encode_body({'files': [b'no name']})


def test_prepare_string_body():
    assert prepare_message_body('hello') == {'content': 'hello'}


def test_prepare_defuses_everyone():
    body = {'content': 'ping @everyone and @here, not <@1234>'}
    prepared = prepare_message_body(body, disable_everyone=True)

    assert prepared['content'] == 'ping @\u200beveryone and @\u200bhere, not <@1234>'
    assert body['content'] == 'ping @everyone and @here, not <@1234>'
    assert prepare_message_body(body)['content'] == body['content']


def test_prepare_default_allowed_mentions():
    default = AllowedMentions(everyone=False, users=[1, 2])
    prepared = prepare_message_body('hi', allowed_mentions=default)

    assert prepared['allowed_mentions'] == {'parse': ['roles'], 'users': ['1', '2'], 'replied_user': True}


def test_prepare_merges_allowed_mentions():
    default = AllowedMentions(everyone=False, roles=False)
    prepared = prepare_message_body(
        {'content': 'hi', 'allowed_mentions': AllowedMentions(roles=[5], replied_user=False)},
        allowed_mentions=default,
    )

    assert prepared['allowed_mentions'] == {'parse': ['users'], 'roles': ['5']}


def test_prepare_keeps_raw_allowed_mentions():
    raw = {'parse': []}
    prepared = prepare_message_body(
        {'content': 'hi', 'allowed_mentions': raw},
        allowed_mentions=AllowedMentions.all(),
    )
    assert prepared['allowed_mentions'] is raw


def test_allowed_mentions_factories():
    assert AllowedMentions.all().to_dict() == {'parse': ['everyone', 'users', 'roles'], 'replied_user': True}
    assert AllowedMentions.none().to_dict() == {'parse': []}


def test_allowed_mentions_ids_are_deduplicated_strings():
    mentions = AllowedMentions(users=[1, '2', 1, 2], roles=('10',))

    assert mentions.users == ('1', '2')
    assert mentions.roles == ('10',)
    assert mentions.to_dict() == {'parse': ['everyone'], 'users': ['1', '2'], 'roles': ['10'], 'replied_user': True}


@pytest.mark.parametrize('users', [['abc'], [True], [-5], [None]])
def test_allowed_mentions_rejects_non_snowflakes(users):
    with pytest.raises(ValueError):
        AllowedMentions(users=users)


def test_allowed_mentions_id_limit():
    assert len(AllowedMentions(roles=range(1, 101)).to_dict()['roles']) == 100
    # Duplicates do not count against the limit
    assert len(AllowedMentions(users=list(range(1, 101)) * 2).users) == 100

    with pytest.raises(ValueError):
        AllowedMentions(roles=range(1, 102))


def test_allowed_mentions_from_dict():
    mentions = AllowedMentions.from_dict({'parse': ['everyone', 'roles'], 'users': ['5', '6']})

    assert mentions.everyone is True
    assert mentions.users == ('5', '6')
    assert mentions.roles is True
    assert mentions.replied_user is False
    assert mentions.to_dict() == {'parse': ['everyone', 'roles'], 'users': ['5', '6']}
    assert AllowedMentions.from_dict({}) == AllowedMentions.none()


def test_allowed_mentions_equality_and_merge():
    assert AllowedMentions() == AllowedMentions.all()
    assert AllowedMentions(users=[1]) != AllowedMentions(users=[2])

    merged = AllowedMentions.none().merge(AllowedMentions(users=[3, 3]))
    assert merged == AllowedMentions(everyone=False, users=['3'], roles=False, replied_user=False)
    assert repr(merged) == "AllowedMentions(everyone=False, users=('3',), roles=False, replied_user=False)"
