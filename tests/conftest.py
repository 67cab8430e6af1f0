import pytest
from fastapi.testclient import TestClient

from intent_api.main import app
from intent_api.services.profiles import load_profile
from intent_api.services.scorer import ReadinessScorer


@pytest.fixture
def default_profile():
    return load_profile("default")


@pytest.fixture
def flash_profile():
    return load_profile("agent_flash")


@pytest.fixture
def scorer(default_profile):
    return ReadinessScorer(default_profile)


@pytest.fixture
def flash_scorer(flash_profile):
    return ReadinessScorer(flash_profile)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
