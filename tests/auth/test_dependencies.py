"""Tests for bearer token authentication on the API."""

from collections.abc import Callable
from uuid import uuid4

from fastapi.testclient import TestClient

from socialfeed.auth.security import create_access_token


FEED_URL = "/v1/posts"


def test_missing_token_is_401(client: TestClient) -> None:
    response = client.get(FEED_URL)

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["message"] == "Access token not provided"


def test_non_bearer_scheme_is_401(client: TestClient) -> None:
    response = client.get(FEED_URL, headers={"Authorization": "Basic abc"})
    assert response.status_code == 401


def test_invalid_token_is_401(client: TestClient) -> None:
    response = client.get(FEED_URL, headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


def test_non_uuid_subject_is_401(client: TestClient) -> None:
    token = create_access_token({"sub": "alice"})

    response = client.get(FEED_URL, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_valid_token_is_accepted(
    client: TestClient, make_token: Callable[..., str]
) -> None:
    token = make_token(uuid4())

    response = client.get(FEED_URL, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json() == []
