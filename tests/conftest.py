"""Shared fixtures for the sparkcli tests."""

from pathlib import Path
from typing import Iterator

import pytest

from sparkcli.config.settings import Configuration
from sparkcli.config.store import ConfigStore
from sparkcli.core.client import SparkClient

BASE_URL = "https://api.example.test/v1"
ACCESS_TOKEN = "A"


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """A config file with client credentials and an access token."""
    path = tmp_path / "sparkcli.toml"
    path.write_text(
        f'BaseUrl = "{BASE_URL}"\n'
        'ClientId = "c"\n'
        'ClientSecret = "s"\n'
        f'AccessToken = "{ACCESS_TOKEN}"\n'
        "AccessExpires = 9999999999.0\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def store(config_path: Path) -> ConfigStore:
    store = ConfigStore(config_path)
    store.load()
    return store


@pytest.fixture
def config(store: ConfigStore) -> Configuration:
    return store.config


@pytest.fixture
def client(store: ConfigStore) -> Iterator[SparkClient]:
    with SparkClient(store) as client:
        yield client
