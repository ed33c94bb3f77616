"""Test configuration and fixtures for the user registry."""

from tests.fixtures import *  # noqa: F401,F403
