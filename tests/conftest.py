import random

import pytest
from fastapi.testclient import TestClient

from storechat.config import Settings
from storechat.dependencies import get_rng, get_settings
from storechat.main import app
from storechat.models.catalog import load_catalog
from storechat.services.responder import ResponseEngine


def make_settings(**overrides) -> Settings:
    values = {"RESPONSE_DELAY_MIN_MS": 0, "RESPONSE_DELAY_MAX_MS": 0, "TOKEN_SECRET": "test_secret"}
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def catalog():
    return load_catalog()


@pytest.fixture
def engine(catalog):
    return ResponseEngine(catalog, random.Random(1234))


@pytest.fixture
def app_settings():
    return make_settings()


@pytest.fixture
def client(app_settings):
    app.dependency_overrides[get_settings] = lambda: app_settings
    app.dependency_overrides[get_rng] = lambda: random.Random(42)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def anyio_backend():
    return "asyncio"
