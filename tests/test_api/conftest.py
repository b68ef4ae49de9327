from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_rate_resolver
from api.main import app
from application.services import RateResolver


@pytest.fixture
def mock_rate_resolver():
    return MagicMock(spec=RateResolver)


@pytest.fixture
def client(mock_rate_resolver):
    # Override the real dependency with mock
    app.dependency_overrides[get_rate_resolver] = lambda: mock_rate_resolver
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
