"""Fixtures for F5 tests - Web API and CLI."""

import pytest
from fastapi.testclient import TestClient

from doubtdesk.web.api import create_app


@pytest.fixture
def client(db_path):
    """Test client bound to the test database."""
    app = create_app(db_path=db_path)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def signup(client):
    """Sign up through the API and return the new user_id."""

    def _signup(email: str, full_name: str, role: str = "student", **details) -> int:
        response = client.post(
            "/api/signup",
            json={
                "email": email,
                "password": "secret-pw",
                "fullName": full_name,
                "role": role,
                "roleDetails": details or {"branch": "CE"},
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["user"]["user_id"]

    return _signup
