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
from typing import Union, Iterable, Mapping, Sequence, Tuple, TYPE_CHECKING, Any, Dict, List

from .constants import ALLOWED_MENTIONS_MAX_IDS
from .utils import MISSING

# fmt: off
__all__ = (
    'AllowedMentions',
)
# fmt: on

if TYPE_CHECKING:
    from typing_extensions import Self

    from .types.snowflake import Snowflake

    MentionTargets = Union[bool, Sequence[Snowflake]]


def _snowflake_ids(kind: str, ids: Iterable[Snowflake]) -> Tuple[str, ...]:
    # Discord answers 400 for duplicate IDs, so they are dropped keeping the first occurrence
    result: Dict[str, None] = {}
    for value in ids:
        as_str = str(value)
        if isinstance(value, bool) or not as_str.isdigit():
            raise ValueError(f'allowed mention {kind} must be snowflakes, not {value!r}')
        result[as_str] = None

    if len(result) > ALLOWED_MENTIONS_MAX_IDS:
        raise ValueError(f'at most {ALLOWED_MENTIONS_MAX_IDS} {kind} can be allowed, got {len(result)}')
    return tuple(result)


def _targets(kind: str, value: Any) -> Any:
    if value is MISSING or isinstance(value, bool):
        return value
    return _snowflake_ids(kind, value)


class AllowedMentions:
    """A class that represents what mentions are allowed in a message.

    This class can be set during :class:`SnowTransfer` initialisation to apply
    to every message sent. Fields left unset fall back to the client wide
    instance when both are merged, and to ``True`` when serialised.

    User and role IDs are stored as strings, in the order given, without
    duplicates. Discord accepts at most 100 of each.

    Attributes
    ------------
    everyone: :class:`bool`
        Whether to allow everyone and here mentions. Defaults to ``True``.
    users: Union[:class:`bool`, Tuple[:class:`str`, ...]]
        Controls the users being mentioned. If ``True`` (the default) then
        users are mentioned based on the message content. If ``False`` then
        users are not mentioned at all. If IDs are given then only the users
        provided will be mentioned, provided those users are in the message
        content.
    roles: Union[:class:`bool`, Tuple[:class:`str`, ...]]
        Controls the roles being mentioned, the same way as ``users``.
    replied_user: :class:`bool`
        Whether to mention the author of the message being replied to. Defaults
        to ``True``.

    Raises
    -------
    ValueError
        An ID is not a snowflake or more than 100 users or roles were given.
    """

    __slots__ = ('everyone', 'users', 'roles', 'replied_user')

    def __init__(
        self,
        *,
        everyone: bool = MISSING,
        users: MentionTargets = MISSING,
        roles: MentionTargets = MISSING,
        replied_user: bool = MISSING,
    ) -> None:
        self.everyone: bool = everyone
        self.users: Union[bool, Tuple[str, ...]] = _targets('users', users)
        self.roles: Union[bool, Tuple[str, ...]] = _targets('roles', roles)
        self.replied_user: bool = replied_user

    @classmethod
    def all(cls) -> Self:
        """A factory method that returns a :class:`AllowedMentions` with all fields explicitly set to ``True``"""
        return cls(everyone=True, users=True, roles=True, replied_user=True)

    @classmethod
    def none(cls) -> Self:
        """A factory method that returns a :class:`AllowedMentions` with all fields set to ``False``"""
        return cls(everyone=False, users=False, roles=False, replied_user=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Builds an instance from an ``allowed_mentions`` payload.

        Every field is set explicitly, as Discord parses nothing that the
        payload does not name.
        """
        parse = data.get('parse') or ()
        users = data.get('users')
        roles = data.get('roles')
        return cls(
            everyone='everyone' in parse,
            users='users' in parse if users is None else users,
            roles='roles' in parse if roles is None else roles,
            replied_user=bool(data.get('replied_user', False)),
        )

    def _resolved(self, name: str) -> Any:
        value = getattr(self, name)
        return True if value is MISSING else value

    def to_dict(self) -> Dict[str, Any]:
        parse: List[str] = []
        data: Dict[str, Any] = {}

        if self._resolved('everyone'):
            parse.append('everyone')

        for kind in ('users', 'roles'):
            value = self._resolved(kind)
            if value is True:
                parse.append(kind)
            elif value is not False:
                data[kind] = list(_snowflake_ids(kind, value))

        if self._resolved('replied_user'):
            data['replied_user'] = True

        data['parse'] = parse
        return data

    def merge(self, other: AllowedMentions) -> AllowedMentions:
        """Returns a new instance using the fields ``other`` sets and ``self`` for the rest."""
        fields = {
            name: getattr(self, name) if getattr(other, name) is MISSING else getattr(other, name)
            for name in self.__slots__
        }
        return AllowedMentions(**fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AllowedMentions):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore

    def __repr__(self) -> str:
        fields = ', '.join(f'{name}={self._resolved(name)!r}' for name in self.__slots__)
        return f'{self.__class__.__name__}({fields})'
