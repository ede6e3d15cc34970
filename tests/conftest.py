"""Shared fixtures for the test suite."""

import pytest

CREDENTIAL_VARS = (
    "AWS_ACCESS_KEY_ID",
    "TIGRIS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "TIGRIS_SECRET_ACCESS_KEY",
    "STORAGE_ACCESS_KEY",
    "STORAGE_SECRET_KEY",
)


@pytest.fixture(autouse=True)
def clean_credentials(monkeypatch):
    """Make sure host storage credentials never leak into tests."""
    for name in CREDENTIAL_VARS:
        monkeypatch.delenv(name, raising=False)
