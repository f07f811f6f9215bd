import os
import socket

import pytest

from spotauth.config import get_settings


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the developer's SPOTAUTH_* variables, .env and config.json out of tests."""
    for key in list(os.environ):
        if key.startswith("SPOTAUTH_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("SPOTAUTH_CONFIG_DIR", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


@pytest.fixture
def free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]
