"""Shared pytest fixtures."""
import sys
sys.dont_write_bytecode = True

import pytest  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_stripe_client():
    """Drop the lazily created module-level Stripe client between tests."""
    import horizontas.api.routes.checkout as checkout_module

    checkout_module._stripe_client = None
    yield
    checkout_module._stripe_client = None


@pytest.fixture(autouse=True)
def _property_timezone(monkeypatch):
    monkeypatch.setenv("PROPERTY_TIMEZONE", "Europe/Vilnius")
