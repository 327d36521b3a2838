"""User entity and its profile property descriptors."""

from .user import User
from .user_property import USER_PROPERTIES, UserProperty

__all__ = ["User", "UserProperty", "USER_PROPERTIES"]
