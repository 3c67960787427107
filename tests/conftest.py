from __future__ import annotations

import sys
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from techforge_client.config import ClientConfig  # noqa: E402
from techforge_client.http_client import HttpClient  # noqa: E402
from techforge_client.session import SessionStore  # noqa: E402

BASE_URL = "https://api.example.com/api/v1"


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(env_name="test", api_base_url=BASE_URL, refresh_interval_seconds=0.05)


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def http(config: ClientConfig, store: SessionStore) -> HttpClient:
    return HttpClient(config=config, session_store=store)
