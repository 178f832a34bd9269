"""Pytest configuration and fixtures."""

import os

import pytest

# Set test environment before any engine code reads settings
os.environ["ENV"] = "test"


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read settings for every test so monkeypatched env vars take effect."""
    from defaultanswer.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def acme_signals():
    """Signals extracted from the Acme Payroll homepage."""
    from defaultanswer.extraction.signals import extract_signals
    from tests.fixtures.pages import ACME_HOMEPAGE

    return extract_signals(ACME_HOMEPAGE, "https://acme.com")


@pytest.fixture
def brightside_signals():
    """Signals extracted from a homepage that passes every check."""
    from defaultanswer.extraction.signals import extract_signals
    from tests.fixtures.pages import BRIGHTSIDE_HOMEPAGE

    return extract_signals(BRIGHTSIDE_HOMEPAGE, "https://brightside.io")
