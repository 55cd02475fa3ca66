"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from users_api.config import Settings
from users_api.main import create_app

TEST_SECRET = "test-secret"


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        environment="test",
        ui_url="http://ui.example.com",
        jwt_secret_key=TEST_SECRET,
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """Create a fresh application with its own store and cache."""
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Create a FastAPI test client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def create_user(client: TestClient):
    """Create a user through the API and return its JSON body."""

    def _create(name: str = "Test User", email: str = "test@example.com") -> dict:
        response = client.post("/users", json={"name": name, "email": email})
        assert response.status_code == 201, response.text
        return response.json()

    return _create
