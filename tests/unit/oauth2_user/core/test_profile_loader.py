"""Unit tests for profile loaders."""

from unittest.mock import Mock

import pytest

from src.oauth2_user.core.entities.user import User
from src.oauth2_user.core.services.profile_loader import (
    FetchingProfileLoader,
    NoOpProfileLoader,
    ProfileLoader,
)


class TestNoOpProfileLoader:
    def test_leaves_profile_untouched(self, user):
        user.first_name = "Jane"

        NoOpProfileLoader().ensure_loaded(user)

        assert user.first_name == "Jane"

    def test_profile_loader_is_abstract(self):
        with pytest.raises(TypeError):
            ProfileLoader()  # type: ignore[abstract]


class TestFetchingProfileLoader:
    """Test the fetch-once loader."""

    @pytest.fixture
    def fetch(self, profile_payload):
        return Mock(return_value=profile_payload)

    @pytest.fixture
    def lazy_user(self, fetch):
        return User.create(12345, False, "sig", "jdoe.42", profile_loader=FetchingProfileLoader(fetch))

    def test_first_read_fetches_profile(self, lazy_user, fetch):
        assert lazy_user.first_name == "Jane"
        assert lazy_user.email == "jane.doe@example.org"
        assert lazy_user.display_name == "Jane Q Doe"
        fetch.assert_called_once_with(lazy_user)

    def test_fetch_is_idempotent(self, lazy_user, fetch):
        _ = lazy_user.first_name
        lazy_user.first_name = "Janet"

        assert lazy_user.first_name == "Janet"
        assert lazy_user.property_values()["first_name"] == "Janet"
        assert fetch.call_count == 1

    def test_no_fetch_before_first_read(self, lazy_user, fetch):
        lazy_user.organization = "Acme"
        fetch.assert_not_called()
        assert not lazy_user.profile_loader.is_loaded(lazy_user)

    def test_failed_fetch_propagates_and_retries(self, profile_payload):
        fetch = Mock(side_effect=[ConnectionError("user-info unavailable"), profile_payload])
        loader = FetchingProfileLoader(fetch)
        user = User.create(12345, False, "sig", "jdoe.42", profile_loader=loader)

        with pytest.raises(ConnectionError):
            _ = user.last_name
        assert not loader.is_loaded(user)

        assert user.last_name == "Doe"
        assert loader.is_loaded(user)
        assert fetch.call_count == 2

    def test_reentrant_read_during_fetch(self, profile_payload):
        def fetch(user):
            # fetchers may read the user they are loading
            assert user.email is None
            return profile_payload

        user = User.create(1, False, "sig", "h", profile_loader=FetchingProfileLoader(fetch))

        assert user.username == "jdoe"

    def test_shared_loader_tracks_users_separately(self, profile_payload):
        fetch = Mock(return_value=profile_payload)
        loader = FetchingProfileLoader(fetch)
        first = User.create(1, False, "sig", "a", profile_loader=loader)
        second = User.create(2, False, "sig", "b", profile_loader=loader)

        _ = first.email
        _ = second.email
        _ = first.email

        assert fetch.call_count == 2

    def test_same_id_objects_each_get_a_profile(self, profile_payload):
        """A user rebuilt for the same id must load its own profile."""
        fetch = Mock(return_value=profile_payload)
        loader = FetchingProfileLoader(fetch)
        first = User.create(1, False, "sig", "a", profile_loader=loader)
        assert first.first_name == "Jane"

        second = User.create(1, False, "sig", "a", profile_loader=loader)

        assert second.first_name == "Jane"
        assert loader.is_loaded(second)
        assert fetch.call_count == 2

    def test_loader_keeps_no_per_user_state(self, profile_payload):
        loader = FetchingProfileLoader(lambda user: profile_payload)

        for user_id in range(50):
            _ = User.create(user_id, False, "sig", f"u{user_id}", profile_loader=loader).email

        assert list(vars(loader)) == ["_fetch"]

    def test_reset_forces_refetch(self, lazy_user, fetch):
        _ = lazy_user.email
        lazy_user.profile_loader.reset(lazy_user)
        _ = lazy_user.email

        assert fetch.call_count == 2

    def test_payload_without_email_keeps_existing(self, profile_payload):
        del profile_payload["email"]
        loader = FetchingProfileLoader(lambda user: profile_payload)
        user = User.create(1, False, "sig", "h", profile_loader=loader)
        user.email = "from-token@example.org"

        assert user.email == "from-token@example.org"
        assert user.organization == "Acme"
