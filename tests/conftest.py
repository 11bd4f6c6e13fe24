"""Shared pytest fixtures for prodgen tests."""

import random

import pytest

import app as app_module
from prodgen.builtins import default_registry
from prodgen.generator import new_context
from prodgen.nodes import Terminal
from prodgen.registry import Registry


@pytest.fixture
def registry() -> Registry:
    """Return a fresh default registry."""
    return default_registry()


@pytest.fixture
def rnd() -> random.Random:
    """Return a seeded random source."""
    return random.Random(1234)


@pytest.fixture
def context(rnd):
    """Return a root variable context bound to the seeded random source."""
    return new_context(rnd)


@pytest.fixture
def recording_registry(registry):
    """
    Default registry plus a `spy` terminal that records the context it sees.

    Yields (registry, seen) where `seen` gets one dict snapshot per generation.
    """
    seen = []

    def make_spy() -> Terminal:
        def generate(context) -> str:
            seen.append(dict(context))
            return ""
        return Terminal(name="spy", generator=generate)

    registry.register_terminal("spy", make_spy)
    return registry, seen


@pytest.fixture
def client():
    """Flask test client with the stored grammar reset."""
    app_module.app.config["TESTING"] = True
    app_module.GLOBAL_GRAMMAR = None
    app_module.GLOBAL_START = None
    with app_module.app.test_client() as client:
        yield client
    app_module.GLOBAL_GRAMMAR = None
    app_module.GLOBAL_START = None
