"""User identities built from OAuth2 ID tokens, with lazily loaded profiles."""

from src.oauth2_user.core.entities.user import User
from src.oauth2_user.core.entities.user_property import USER_PROPERTIES, UserProperty
from src.oauth2_user.core.services.profile_loader import (
    FetchingProfileLoader,
    NoOpProfileLoader,
    ProfileLoader,
)
from src.oauth2_user.core.types.claims import (
    IdTokenClaims,
    IdTokenField,
    InvalidClaimsError,
)

__version__ = "0.1.0"

__all__ = [
    "User",
    "UserProperty",
    "USER_PROPERTIES",
    "ProfileLoader",
    "NoOpProfileLoader",
    "FetchingProfileLoader",
    "IdTokenClaims",
    "IdTokenField",
    "InvalidClaimsError",
]
