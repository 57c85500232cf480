"""Fixtures for the HTTP and websocket endpoint tests."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from townhall.infrastructure.security import create_access_token


@pytest.fixture()
def app(session_factory):
    from main import create_app

    return create_app(session_factory)


@pytest.fixture()
def client(app):
    """Return a test client bound to a clean application instance."""

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def services(app):
    return app.state.notifications


@pytest.fixture()
def token_for():
    def _token(user_id: str) -> str:
        return create_access_token({"sub": user_id})

    return _token


@pytest.fixture()
def auth_headers(token_for):
    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_for(user_id)}"}

    return _headers
