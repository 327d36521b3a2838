"""User domain entity derived from an OAuth2 ID token."""

from collections.abc import Mapping
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field, PrivateAttr

from src.oauth2_user.core.entities.user_property import USER_PROPERTIES
from src.oauth2_user.core.services.profile_loader import (
    NoOpProfileLoader,
    ProfileLoader,
)
from src.oauth2_user.core.types.claims import IdTokenClaims
from src.oauth2_user.runtime.context import get_config


class User(BaseModel):
    """An authenticated end user.

    The identity fields come from the bearer token and never change. Profile
    fields are mutable and may be populated lazily: every profile read first
    asks the injected ``ProfileLoader`` to make sure the profile is loaded.

    Two users are equal when their ``user_id`` values are equal, whatever
    their profile contents.
    """

    user_id: int = Field(frozen=True, description="Numeric user ID (token subject)")
    is_guest: bool = Field(frozen=True, description="Whether this is a guest user")
    signature: str = Field(frozen=True, description="Opaque token-derived signature")
    stable_id: str = Field(frozen=True, description="Stable external username")

    _profile_loader: ProfileLoader = PrivateAttr(default_factory=NoOpProfileLoader)
    # per-object load state, managed by the profile loader
    _profile_loaded: bool = PrivateAttr(default=False)
    _profile_loading: bool = PrivateAttr(default=False)

    # not a user property; set directly by callers
    _email: str | None = PrivateAttr(default=None)
    _username: str | None = PrivateAttr(default=None)
    _first_name: str | None = PrivateAttr(default=None)
    _middle_name: str | None = PrivateAttr(default=None)
    _last_name: str | None = PrivateAttr(default=None)
    _organization: str | None = PrivateAttr(default=None)
    _interests: str | None = PrivateAttr(default=None)

    @classmethod
    def create(
        cls,
        user_id: int,
        is_guest: bool,
        signature: str,
        stable_id: str,
        profile_loader: ProfileLoader | None = None,
    ) -> "User":
        """Create a user from primitive identity values with an empty profile."""
        user = cls(
            user_id=user_id,
            is_guest=is_guest,
            signature=signature,
            stable_id=stable_id,
        )
        if profile_loader is not None:
            user._profile_loader = profile_loader
        return user

    @classmethod
    def from_claims(
        cls,
        claims: dict[str, Any],
        profile_loader: ProfileLoader | None = None,
    ) -> "User":
        """Create a user from a decoded, already verified ID token.

        Args:
            claims: Decoded ID token claims
            profile_loader: Loader used to populate profile fields on demand

        Returns:
            User carrying the token's identity fields

        Raises:
            InvalidClaimsError: If a required claim is missing or malformed
        """
        token = IdTokenClaims.parse(claims)
        user = cls.create(
            user_id=token.sub,
            is_guest=token.is_guest,
            signature=token.signature,
            stable_id=token.preferred_username,
            profile_loader=profile_loader,
        )
        if token.email is not None:
            user._email = token.email
        logger.debug(f"Built user #{user.user_id} from ID token claims")
        return user

    @property
    def profile_loader(self) -> ProfileLoader:
        return self._profile_loader

    def _ensure_profile_loaded(self) -> None:
        self._profile_loader.ensure_loaded(self)

    def apply_property_values(self, payload: Mapping[str, Any]) -> None:
        """Set every user property from a key-value payload.

        Each property is looked up by its serialization key. Absent keys and
        null values clear the property rather than leaving it untouched.
        """
        for prop in USER_PROPERTIES.values():
            value = payload.get(prop.serialization_key)
            if value is not None and not isinstance(value, str):
                value = str(value)
            prop.set_value(self, value)
        logger.debug(f"Applied {len(USER_PROPERTIES)} user properties to user #{self.user_id}")

    def property_values(self) -> dict[str, str | None]:
        """Return current property values keyed by serialization key."""
        return {
            prop.serialization_key: prop.get_value(self)
            for prop in USER_PROPERTIES.values()
        }

    @property
    def email(self) -> str | None:
        self._ensure_profile_loaded()
        return self._email

    @email.setter
    def email(self, value: str | None) -> None:
        self._email = value

    @property
    def username(self) -> str | None:
        self._ensure_profile_loaded()
        return self._username

    @username.setter
    def username(self, value: str | None) -> None:
        self._username = value

    @property
    def first_name(self) -> str | None:
        self._ensure_profile_loaded()
        return self._first_name

    @first_name.setter
    def first_name(self, value: str | None) -> None:
        self._first_name = value

    @property
    def middle_name(self) -> str | None:
        self._ensure_profile_loaded()
        return self._middle_name

    @middle_name.setter
    def middle_name(self, value: str | None) -> None:
        self._middle_name = value

    @property
    def last_name(self) -> str | None:
        self._ensure_profile_loaded()
        return self._last_name

    @last_name.setter
    def last_name(self, value: str | None) -> None:
        self._last_name = value

    @property
    def organization(self) -> str | None:
        self._ensure_profile_loaded()
        return self._organization

    @organization.setter
    def organization(self, value: str | None) -> None:
        self._organization = value

    @property
    def interests(self) -> str | None:
        self._ensure_profile_loaded()
        return self._interests

    @interests.setter
    def interests(self, value: str | None) -> None:
        self._interests = value

    @property
    def display_name(self) -> str:
        """Human-friendly name: the guest label, or first/middle/last joined."""
        if self.is_guest:
            return get_config().identity.guest_display_name
        return (
            _format_name_part(self.first_name)
            + _format_name_part(self.middle_name)
            + _format_name_part(self.last_name)
        ).strip()

    def __str__(self) -> str:
        return f"User #{self.user_id} - {self.email}"

    def __eq__(self, other: Any) -> bool:
        """Compare users by identity only."""
        if not isinstance(other, User):
            return False
        return self.user_id == other.user_id

    def __hash__(self) -> int:
        return hash(self.user_id)


def _format_name_part(name_part: str | None) -> str:
    name_part = (name_part or "").strip()
    return " " + name_part if name_part else ""
