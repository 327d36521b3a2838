"""Core services exports."""

from .profile_loader import FetchingProfileLoader, NoOpProfileLoader, ProfileLoader

__all__ = ["ProfileLoader", "NoOpProfileLoader", "FetchingProfileLoader"]
