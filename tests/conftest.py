"""Shared fixtures: isolated registries and a clean process-wide state per test."""
from __future__ import annotations

import pytest

from wenfit import clear_error_messages, clear_plugins
from wenfit.config import get_settings
from wenfit.errors import MessageRegistry
from wenfit.plugins import PluginRegistry


@pytest.fixture(autouse=True)
def _reset_global_registries():
    """Process-wide registries and cached settings never leak between tests."""
    yield
    clear_plugins()
    clear_error_messages()
    get_settings.cache_clear()


@pytest.fixture
def messages() -> MessageRegistry:
    return MessageRegistry()


@pytest.fixture
def plugins() -> PluginRegistry:
    return PluginRegistry()
