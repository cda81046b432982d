"""
Shared pytest fixtures for NeoCities client tests.
"""

from pathlib import Path

import pytest

from neocities_client.site import Site


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep real credentials and overrides from the environment out of tests."""
    for name in (
        "NEOCITIES_API_KEY",
        "NEOCITIES_BASE_URL",
        "NEOCITIES_TIMEOUT",
        "NEOCITIES_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def site() -> Site:
    """Site with an API key."""
    return Site(site_name="testsite", key="test-key")


@pytest.fixture
def workdir(tmp_path, monkeypatch) -> Path:
    """Run the test from inside an empty temporary directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
