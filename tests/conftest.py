"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration and target fixtures.
Fixtures marked autouse apply to every test unless noted.
"""

from __future__ import annotations

import logging
import os

import pytest

from quill.rules import RulesCollection
from quill.targets import Item, ItemRep, Layout

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def text_rep() -> ItemRep:
    return ItemRep(Item("/posts/hello.md"))


@pytest.fixture
def binary_rep() -> ItemRep:
    return ItemRep(Item("/images/logo.png", binary=True))


@pytest.fixture
def layout() -> Layout:
    return Layout("/default.html")


@pytest.fixture
def rules() -> RulesCollection:
    return RulesCollection()


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    monkeypatch.setattr("quill.config.load_dotenv", lambda *_args, **_kwargs: False)


@pytest.fixture(autouse=True)
def isolate_quill_env(request, monkeypatch):
    """Clear QUILL_* env vars to prevent test pollution.

    Opt-out: @pytest.mark.allow_env_pollution
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("QUILL_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("hypothesis").setLevel(logging.WARNING)
