import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_tinystache_logging():
    """CLI runs attach a handler bound to the runner's stderr; drop it afterwards."""
    yield
    logging.getLogger("tinystache").handlers.clear()


@pytest.fixture
def no_user_config(tmp_path, monkeypatch):
    """Points the user-level config file at a path that does not exist."""
    monkeypatch.setattr("tinystache.config.loader.USER_CONFIG_FILE", tmp_path / "no-user-config" / "config.toml")
