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

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Union

if TYPE_CHECKING:
    from aiohttp import ClientResponse
    from typing_extensions import TypeGuard

    from .types.error import (
        Error as ErrorPayload,
        FormErrors as FormErrorsPayload,
        FormErrorWrapper as FormErrorWrapperPayload,
    )

__all__ = (
    'SnowTransferException',
    'ClientException',
    'HTTPException',
    'RateLimited',
    'Unauthorized',
    'Forbidden',
    'NotFound',
    'DiscordServerError',
)


class SnowTransferException(Exception):
    """Base exception class for snowtransfer

    Ideally speaking, this could be caught to handle any exceptions raised from this library.
    """

    __slots__ = ()


class ClientException(SnowTransferException):
    """Exception that's raised when an operation in the :class:`SnowTransfer` fails.

    These are usually for exceptions that happened due to user input.
    """

    __slots__ = ()


def _flatten_error_dict(d: FormErrorsPayload, key: str = '', /) -> Dict[str, str]:
    def is_wrapper(x: FormErrorsPayload) -> TypeGuard[FormErrorWrapperPayload]:
        return '_errors' in x

    items: List[Tuple[str, str]] = []

    if is_wrapper(d) and not key:
        items.append(('miscellaneous', ' '.join(x.get('message', '') for x in d['_errors'])))
        d.pop('_errors')  # type: ignore

    for k, v in d.items():
        new_key = key + '.' + k if key else k

        if isinstance(v, dict):
            if is_wrapper(v):
                _errors = v['_errors']
                items.append((new_key, ' '.join(x.get('message', '') for x in _errors)))
            else:
                items.extend(_flatten_error_dict(v, new_key).items())
        else:
            items.append((new_key, v))  # type: ignore

    return dict(items)


class HTTPException(SnowTransferException):
    """Exception that's raised when an HTTP request operation fails.

    Attributes
    ------------
    response: :class:`aiohttp.ClientResponse`
        The response of the failed HTTP request.
    text: :class:`str`
        The text of the error. Could be an empty string.
    status: :class:`int`
        The status code of the HTTP request.
    code: :class:`int`
        The Discord specific error code for the failure.
    json: :class:`dict`
        The raw error JSON.
    """

    def __init__(self, response: ClientResponse, message: Optional[Union[str, Dict[str, Any]]]):
        self.response: ClientResponse = response
        self.status: int = response.status
        self.code: int = 0
        self.text: str
        self.json: ErrorPayload
        if isinstance(message, dict):
            self.json = message  # type: ignore
            self.code = message.get('code', 0)
            base = message.get('message', '')
            errors = message.get('errors')
            if errors:
                errors = _flatten_error_dict(errors)
                helpful = '\n'.join('In %s: %s' % t for t in errors.items())
                self.text = base + '\n' + helpful
            else:
                self.text = base
        else:
            self.text = message or ''
            self.json = {'code': 0, 'message': message or ''}

        fmt = '{0.status} {0.reason} (error code: {1})'
        if len(self.text):
            fmt += ': {2}'

        super().__init__(fmt.format(self.response, self.code, self.text))


class RateLimited(SnowTransferException):
    """Exception that's raised for when status code 429 occurs
    and the timeout is greater than the configured maximum using
    the ``max_ratelimit_timeout`` parameter in :class:`SnowTransfer`.

    Since sometimes requests are halted pre-emptively before they're
    even made, this **does not** subclass :exc:`HTTPException`.

    Attributes
    ------------
    retry_after: :class:`float`
        The amount of seconds that the client should wait before retrying
        the request.
    """

    __slots__ = ('retry_after',)

    def __init__(self, retry_after: float):
        self.retry_after = retry_after
        super().__init__(f'Too many requests. Retry in {retry_after:.2f} seconds.')


class Unauthorized(HTTPException):
    """Exception that's raised for when status code 401 occurs.

    This usually means the token is invalid or was revoked.

    Subclass of :exc:`HTTPException`
    """

    __slots__ = ()


class Forbidden(HTTPException):
    """Exception that's raised for when status code 403 occurs.

    Subclass of :exc:`HTTPException`
    """

    __slots__ = ()


class NotFound(HTTPException):
    """Exception that's raised for when status code 404 occurs.

    Subclass of :exc:`HTTPException`
    """

    __slots__ = ()


class DiscordServerError(HTTPException):
    """Exception that's raised for when a 500 range status code occurs.

    This is raised once the request has been retried as many times as allowed.

    Subclass of :exc:`HTTPException`.
    """

    __slots__ = ()
