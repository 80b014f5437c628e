"""Shared fixtures for croncalc tests."""

import os

import pytest

from croncalc.config import ENV_PREFIX, reset_config


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Run every test against the default configuration."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)
    reset_config()
    yield
    reset_config()
