"""Profile loaders that populate a user's mutable fields on first access.

A ``User`` delegates to its loader before every profile read. The default
loader does nothing: all profile data must be set explicitly. The fetching
loader pulls a profile payload once per user from an injected callable, for
example a user-info endpoint client owned by the application.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from src.oauth2_user.core.entities.user import User

ProfileFetcher = Callable[["User"], Mapping[str, Any]]


class ProfileLoader(ABC):
    """Abstract interface for on-demand population of profile fields."""

    @abstractmethod
    def ensure_loaded(self, user: User) -> None:
        """Make sure the profile fields of ``user`` are populated.

        Implementations must be idempotent: once a user has been loaded,
        further calls must neither refetch nor overwrite its fields.

        Args:
            user: The user whose profile is about to be read
        """
        pass


class NoOpProfileLoader(ProfileLoader):
    """Loader for users whose profile is always set explicitly."""

    def ensure_loaded(self, user: User) -> None:
        return None


class FetchingProfileLoader(ProfileLoader):
    """Fetch the profile payload once per user object and apply it.

    Load state lives on each ``User``, so one loader can be shared by any
    number of users, including separate objects with the same id.

    A failed fetch is logged and re-raised; the user stays unloaded so the
    next accessor call tries again instead of returning partial data.
    """

    def __init__(self, fetch: ProfileFetcher):
        self._fetch = fetch

    def is_loaded(self, user: User) -> bool:
        return user._profile_loaded

    def ensure_loaded(self, user: User) -> None:
        if user._profile_loaded or user._profile_loading:
            return

        user._profile_loading = True
        try:
            logger.debug(f"Fetching profile for user #{user.user_id}")
            try:
                payload = self._fetch(user)
            except Exception as e:
                logger.warning(f"Profile fetch failed for user #{user.user_id}: {e}")
                raise

            user.apply_property_values(payload)
            email = payload.get("email")
            if email is not None:
                user.email = str(email)
            user._profile_loaded = True
        finally:
            user._profile_loading = False

    def reset(self, user: User) -> None:
        """Forget that ``user`` was loaded so the next read fetches again."""
        user._profile_loaded = False
