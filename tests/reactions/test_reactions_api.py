"""API tests for the reaction endpoints."""

from collections.abc import Callable
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def post_id(client: TestClient, auth_headers: dict[str, str]) -> str:
    response = client.post("/v1/posts", data={"content": "react"}, headers=auth_headers)
    return response.json()["id"]


def test_react_add_change_remove(
    client: TestClient, auth_headers: dict[str, str], post_id: str
) -> None:
    url = f"/v1/react/Post/{post_id}"

    added = client.put(url, json={"reaction_type": "Like"}, headers=auth_headers)
    updated = client.put(url, json={"reaction_type": "Wow"}, headers=auth_headers)
    removed = client.put(url, json={"reaction_type": "Wow"}, headers=auth_headers)

    assert added.json() == {"status": "added", "type": "Like"}
    assert updated.json() == {"status": "updated", "type": "Wow"}
    assert removed.json() == {"status": "removed", "type": None}
    post = client.get(f"/v1/posts/{post_id}", headers=auth_headers).json()
    assert post["likes_count"] == 0


def test_default_reaction_type_is_like(
    client: TestClient, auth_headers: dict[str, str], post_id: str
) -> None:
    response = client.put(f"/v1/react/Post/{post_id}", json={}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["type"] == "Like"


def test_list_reactors(
    client: TestClient,
    auth_headers: dict[str, str],
    make_token: Callable[..., str],
    post_id: str,
) -> None:
    bob_id = uuid4()
    bob = {"Authorization": f"Bearer {make_token(bob_id, name='Bob')}"}
    client.put(f"/v1/react/Post/{post_id}", json={"reaction_type": "Like"}, headers=auth_headers)
    client.put(f"/v1/react/Post/{post_id}", json={"reaction_type": "Love"}, headers=bob)

    response = client.get(f"/v1/react/Post/{post_id}", headers=auth_headers)

    assert response.status_code == 200
    reactors = response.json()
    assert [r["user"]["name"] for r in reactors] == ["Bob", "Alice"]
    assert reactors[0]["user"]["id"] == str(bob_id)
    assert reactors[0]["type"] == "Love"
    assert "reacted_at" in reactors[0]


def test_react_to_comment(
    client: TestClient, auth_headers: dict[str, str], post_id: str
) -> None:
    comment = client.post(
        f"/v1/posts/{post_id}/comments", json={"content": "hi"}, headers=auth_headers
    ).json()

    response = client.put(
        f"/v1/react/Comment/{comment['id']}",
        json={"reaction_type": "Haha"},
        headers=auth_headers,
    )
    comments = client.get(f"/v1/posts/{post_id}/comments", headers=auth_headers).json()

    assert response.json() == {"status": "added", "type": "Haha"}
    assert comments[0]["likes_count"] == 1
    assert comments[0]["user_reaction"] == "Haha"
    assert comments[0]["top_reactions"] == ["Haha"]


def test_unknown_target_type_is_422(
    client: TestClient, auth_headers: dict[str, str], post_id: str
) -> None:
    response = client.put(f"/v1/react/Photo/{post_id}", json={}, headers=auth_headers)
    assert response.status_code == 422


def test_missing_target_is_404(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.put(f"/v1/react/Comment/{uuid4()}", json={}, headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "Comment not found"


def test_blank_reaction_type_is_422(
    client: TestClient, auth_headers: dict[str, str], post_id: str
) -> None:
    response = client.put(
        f"/v1/react/Post/{post_id}", json={"reaction_type": "   "}, headers=auth_headers
    )
    assert response.status_code == 422


def test_requires_auth(client: TestClient, post_id: str) -> None:
    response = client.put(f"/v1/react/Post/{post_id}", json={})
    assert response.status_code == 401
