import random
import string

import pytest
from fastapi.testclient import TestClient

from server.dependencies import get_push_sender
from server.main import app
from fakes import FakePushSender


def get_random_string(length):
    return ''.join(random.choices(string.ascii_lowercase + string.digits, k=length))


def get_random_email():
    return f"user_{get_random_string(8)}@example.com"


@pytest.fixture
def push_sender():
    sender = FakePushSender()
    app.dependency_overrides[get_push_sender] = lambda: sender
    yield sender
    app.dependency_overrides.pop(get_push_sender, None)


@pytest.fixture
def api_client():
    with TestClient(app) as client:
        yield client


@pytest.fixture
def credentials():
    return {"name": "Auth User", "email": get_random_email(), "password": "password123"}


@pytest.fixture
def auth_token(api_client, credentials):
    response = api_client.post("/auth/signup", json=credentials)
    assert response.status_code == 201
    return response.json()["access_token"]


@pytest.fixture
def auth_headers(auth_token):
    return {"Authorization": f"Bearer {auth_token}"}
