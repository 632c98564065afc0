"""Shared test configuration.

Wall-clock tests are marked with ``@pytest.mark.live``.
Run them with: ``LIVE=1 pytest -m live``
"""

import os

import pytest

from tests.helpers import RSA_PRIVATE_PEM_PKCS8, FakeMinter

# ── Auto-skip when LIVE env not set ─────────────────────────────────────────


def pytest_collection_modifyitems(config, items):
    """Auto-skip live tests when LIVE env var is not set."""
    if os.environ.get("LIVE", "").lower() in ("1", "true", "yes"):
        return
    skip_marker = pytest.mark.skip(reason="Set LIVE=1 to run wall-clock retry tests")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_marker)


# ── Fixtures ────────────────────────────────────────────────────────────────


@pytest.fixture
def private_pem() -> str:
    return RSA_PRIVATE_PEM_PKCS8


@pytest.fixture
def minter() -> FakeMinter:
    return FakeMinter()
