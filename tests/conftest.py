"""Test configuration and fixtures for oauth2-user."""

from tests.fixtures import *  # noqa: F401,F403
