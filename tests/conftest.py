import os

import pytest

# Settings read by r2cli.config, plus the header prefix
CONFIG_KEYS = (
    "ENDPOINT_URL",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "DEBUG",
    "PROFILE",
    "REPLACE_UNDERSCORES_WITH_DASHES",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove any settings the host environment might leak in."""
    for key in list(os.environ):
        if key.startswith("S3_CLI_HTTP_") or key in CONFIG_KEYS:
            monkeypatch.delenv(key, raising=False)
    return monkeypatch
