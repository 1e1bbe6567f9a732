"""API tests for the post endpoints."""

from collections.abc import Callable, Iterator
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from socialfeed.main import app
from socialfeed.storage.dependencies import get_storage_service
from socialfeed.storage.service import InvalidContentTypeError


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class FakeStorage:
    """Records uploads instead of talking to Firebase."""

    def __init__(self):
        self.uploads: list[dict] = []

    async def upload_post_image(self, content, content_type, author_id, filename=None):
        if content_type != "image/png":
            raise InvalidContentTypeError(content_type, ["image/png"])
        self.uploads.append(
            {"content": content, "author_id": author_id, "filename": filename}
        )
        return f"https://cdn.example/{author_id}/{filename}"


@pytest.fixture
def storage() -> Iterator[FakeStorage]:
    fake = FakeStorage()
    app.dependency_overrides[get_storage_service] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_storage_service, None)


class TestCreatePost:
    def test_text_post(
        self, client: TestClient, auth_headers: dict[str, str], user_id: UUID
    ) -> None:
        response = client.post(
            "/v1/posts", data={"content": "Hello feed"}, headers=auth_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["content"] == "Hello feed"
        assert data["privacy"] == "public"
        assert data["author"]["id"] == str(user_id)
        assert data["author"]["name"] == "Alice"
        assert data["author"]["avatar"] == "https://cdn.example/alice.png"
        assert data["likes_count"] == 0
        assert data["is_liked"] is False

    def test_image_post(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        user_id: UUID,
        storage: FakeStorage,
    ) -> None:
        response = client.post(
            "/v1/posts",
            data={"privacy": "private"},
            files={"image": ("cat.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["content"] is None
        assert data["privacy"] == "private"
        assert data["image_url"] == f"https://cdn.example/{user_id}/cat.png"
        assert storage.uploads[0]["content"] == PNG_BYTES

    def test_rejected_image_type(
        self, client: TestClient, auth_headers: dict[str, str], storage: FakeStorage
    ) -> None:
        response = client.post(
            "/v1/posts",
            files={"image": ("doc.pdf", b"%PDF-1.4", "application/pdf")},
            headers=auth_headers,
        )

        assert response.status_code == 415
        assert storage.uploads == []

    def test_empty_post(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        response = client.post("/v1/posts", data={"content": "  "}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "A post needs text or an image"

    def test_invalid_privacy(
        self, client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        response = client.post(
            "/v1/posts",
            data={"content": "x", "privacy": "friends"},
            headers=auth_headers,
        )

        assert response.status_code == 422

    def test_requires_auth(self, client: TestClient) -> None:
        response = client.post("/v1/posts", data={"content": "anon"})
        assert response.status_code == 401


class TestReadPosts:
    def test_feed_hides_others_private_posts(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        make_token: Callable[..., str],
    ) -> None:
        client.post("/v1/posts", data={"content": "public"}, headers=auth_headers)
        client.post(
            "/v1/posts",
            data={"content": "private", "privacy": "private"},
            headers=auth_headers,
        )
        other = {"Authorization": f"Bearer {make_token(uuid4(), name='Bob')}"}

        own_feed = client.get("/v1/posts", headers=auth_headers).json()
        other_feed = client.get("/v1/posts", headers=other).json()

        assert sorted(p["content"] for p in own_feed) == ["private", "public"]
        assert [p["content"] for p in other_feed] == ["public"]

    def test_get_post(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        created = client.post(
            "/v1/posts", data={"content": "one"}, headers=auth_headers
        ).json()

        response = client.get(f"/v1/posts/{created['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    def test_get_private_post_of_other_user_is_404(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        make_token: Callable[..., str],
    ) -> None:
        created = client.post(
            "/v1/posts",
            data={"content": "hidden", "privacy": "private"},
            headers=auth_headers,
        ).json()
        other = {"Authorization": f"Bearer {make_token(uuid4())}"}

        response = client.get(f"/v1/posts/{created['id']}", headers=other)

        assert response.status_code == 404

    def test_get_unknown_post(
        self, client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        response = client.get(f"/v1/posts/{uuid4()}", headers=auth_headers)
        assert response.status_code == 404


class TestLegacyLike:
    def test_like_toggles(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        post_id = client.post(
            "/v1/posts", data={"content": "like me"}, headers=auth_headers
        ).json()["id"]

        first = client.put(f"/v1/posts/{post_id}/like", headers=auth_headers)
        liked = client.get(f"/v1/posts/{post_id}", headers=auth_headers).json()
        second = client.put(f"/v1/posts/{post_id}/like", headers=auth_headers)

        assert first.json() == {"status": "added", "type": "Like"}
        assert liked["likes_count"] == 1
        assert liked["user_reaction"] == "Like"
        assert liked["recent_reactors"][0]["name"] == "Alice"
        assert second.json() == {"status": "removed", "type": None}

    def test_like_unknown_post(
        self, client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        response = client.put(f"/v1/posts/{uuid4()}/like", headers=auth_headers)
        assert response.status_code == 404
