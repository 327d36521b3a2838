"""Descriptors for the optional profile properties of a user."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.oauth2_user.core.entities.user import User


@dataclass(frozen=True)
class UserProperty:
    """A named profile property with its labels, flags and accessors.

    The three boolean flags are carried as metadata for callers (form
    rendering, public profile views); nothing in this package acts on them.
    """

    name: str
    display_name: str
    serialization_key: str
    is_required: bool
    is_public: bool
    is_multi_line: bool
    getter: Callable[[User], str | None] = field(repr=False, compare=False)
    setter: Callable[[User, str | None], None] = field(repr=False, compare=False)

    def get_value(self, user: User) -> str | None:
        return self.getter(user)

    def set_value(self, user: User, value: str | None) -> None:
        self.setter(user, value)


def _property(
    name: str,
    display_name: str,
    serialization_key: str,
    is_required: bool,
    is_public: bool,
    is_multi_line: bool,
    attribute: str,
) -> UserProperty:
    def getter(user: User) -> str | None:
        return getattr(user, attribute)

    def setter(user: User, value: str | None) -> None:
        setattr(user, attribute, value)

    return UserProperty(
        name=name,
        display_name=display_name,
        serialization_key=serialization_key,
        is_required=is_required,
        is_public=is_public,
        is_multi_line=is_multi_line,
        getter=getter,
        setter=setter,
    )


def _create_user_properties() -> Mapping[str, UserProperty]:
    properties = [
        _property("username", "Username", "username", False, False, False, "username"),
        _property("firstName", "First Name", "first_name", True, True, False, "first_name"),
        _property("middleName", "Middle Name", "middle_name", False, True, False, "middle_name"),
        _property("lastName", "Last Name", "last_name", True, True, False, "last_name"),
        _property("organization", "Organization", "organization", True, True, False, "organization"),
        _property("interests", "Interests", "interests", False, False, True, "interests"),
    ]
    by_name: dict[str, UserProperty] = {}
    for prop in properties:
        if prop.name in by_name:
            raise ValueError(f"Duplicate user property name: {prop.name}")
        by_name[prop.name] = prop
    return MappingProxyType(by_name)


# Built once at import; read-only afterwards
USER_PROPERTIES: Mapping[str, UserProperty] = _create_user_properties()
