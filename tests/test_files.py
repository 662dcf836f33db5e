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
import os

import snowtransfer
import pytest


FILE = BytesIO()
NAME = os.path.basename(__file__)


def test_file_with_no_name():
    f = snowtransfer.File(__file__)
    assert f.filename == NAME


def test_io_with_no_name():
    f = snowtransfer.File(FILE)
    assert f.filename == 'untitled'


def test_file_with_name():
    f = snowtransfer.File(__file__, 'test')
    assert f.filename == 'test'


def test_bytes_with_name():
    f = snowtransfer.File(b'hello', 'hello.txt')
    assert f.filename == 'hello.txt'
    assert f.fp.read() == b'hello'


def test_file_with_no_name_and_spoiler():
    f = snowtransfer.File(__file__, spoiler=True)
    assert f.filename == 'SPOILER_' + NAME
    assert f.spoiler == True


def test_file_with_spoiler_name_and_implicit_spoiler():
    f = snowtransfer.File(__file__, 'SPOILER_image.png')
    assert f.filename == 'SPOILER_image.png'
    assert f.spoiler == True


def test_file_with_spoiler_name_and_not_spoiler():
    f = snowtransfer.File(__file__, 'SPOILER_image.png', spoiler=False)
    assert f.filename == 'image.png'
    assert f.spoiler == False


def test_file_with_name_and_double_spoiler_and_implicit_spoiler():
    f = snowtransfer.File(__file__, 'SPOILER_SPOILER_image.png')
    assert f.filename == 'SPOILER_image.png'
    assert f.spoiler == True


def test_file_not_spoiler_with_overriding_name_spoiler():
    f = snowtransfer.File(__file__)
    f.filename = 'SPOILER_image.png'
    assert f.filename == 'SPOILER_image.png'
    assert f.spoiler == True


def test_file_reset():
    f = snowtransfer.File(__file__)
    f.fp.read(10)

    f.reset(seek=True)
    assert f.fp.tell() == 0

    f.fp.read(10)
    f.reset(seek=False)
    assert f.fp.tell() == 10


def test_io_reset_to_original_position():
    buffer = BytesIO(b'0123456789')
    buffer.seek(4)
    f = snowtransfer.File(buffer, 'digits.txt')
    assert f.fp.read() == b'456789'

    f.reset(seek=1)
    assert f.fp.read() == b'456789'


def test_io_failure():
    class NonSeekableReadable(BytesIO):
        def seekable(self):
            return False

        def readable(self):
            return False

    f = NonSeekableReadable()

    with pytest.raises(ValueError) as excinfo:
        snowtransfer.File(f)

    assert str(excinfo.value) == f"File buffer {f!r} must be seekable and readable"


def test_close_only_closes_owned_files():
    buffer = BytesIO(b'test content')
    f = snowtransfer.File(buffer, 'test.txt')

    # aiohttp closing the buffer must not close it
    f.fp.close()
    assert not buffer.closed

    f.close()
    assert not buffer.closed

    owned = snowtransfer.File(__file__)
    owned.close()
    assert owned.fp.closed


def test_io_to_dict():
    buffer = BytesIO(b"test content")
    file = snowtransfer.File(buffer, filename="test.txt", description="test description")

    data = file.to_dict(0)
    assert data["id"] == 0
    assert data["filename"] == "test.txt"
    assert data["description"] == "test description"


def test_to_dict_without_description():
    file = snowtransfer.File(BytesIO(b'x'), filename='x.bin')
    assert file.to_dict(3) == {'id': 3, 'filename': 'x.bin'}


def test_from_payload():
    data = snowtransfer.File.from_payload({'name': 'cat.png', 'file': b'meow', 'description': 'a cat'})
    assert data.filename == 'cat.png'
    assert data.description == 'a cat'
    assert data.fp.read() == b'meow'

    existing = snowtransfer.File(BytesIO(b'x'), 'x.bin')
    assert snowtransfer.File.from_payload(existing) is existing

    with pytest.raises(TypeError):
        snowtransfer.File.from_payload({'file': b'no name'})
