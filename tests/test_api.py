"""
Endpoint tests through FastAPI's TestClient with DAOs and the session cache
swapped for in-memory doubles.
"""

import pytest
from fastapi.testclient import TestClient

from content_api.api.deps import get_article_dao, get_user_dao
from content_api.cache.auth_cache import AuthCache
from content_api.core.rate_limiter import limiter
from content_api.core.security import DEVICE_HEADER, TOKEN_HEADER
from content_api.dao.article import ArticleDao
from content_api.dao.user import UserDao
from content_api.main import app


@pytest.fixture
def client(fake_db, fake_redis):
    limiter.reset()
    original_cache = app.state.auth_cache
    app.state.auth_cache = AuthCache(fake_redis, default_ttl=3600)
    app.dependency_overrides[get_user_dao] = lambda: UserDao(database=fake_db)
    app.dependency_overrides[get_article_dao] = lambda: ArticleDao(database=fake_db)
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.auth_cache = original_cache


def register_and_login(client, device="dev-1", phone="13800000000"):
    client.post("/api/v1/users/register", json={"phone": phone, "password": "secret123"})
    resp = client.post(
        "/api/v1/auth/login",
        json={"phone": phone, "password": "secret123"},
        headers={DEVICE_HEADER: device},
    )
    return {DEVICE_HEADER: device, TOKEN_HEADER: resp.json()["data"]["token"]}


class TestAuthEndpoints:
    def test_register_and_login(self, client) -> None:
        resp = client.post("/api/v1/users/register", json={"phone": "13800000000", "password": "secret123"})
        assert resp.json() == {"code": 0, "msg": "success", "data": {"id": 1}}

        login = client.post(
            "/api/v1/auth/login",
            json={"phone": "13800000000", "password": "secret123"},
            headers={DEVICE_HEADER: "dev-1"},
        )
        body = login.json()
        assert body["code"] == 0
        assert len(body["data"]["token"]) == 32

    def test_duplicate_registration(self, client) -> None:
        client.post("/api/v1/users/register", json={"phone": "13800000000", "password": "secret123"})
        resp = client.post("/api/v1/users/register", json={"phone": "13800000000", "password": "secret123"})
        assert resp.json()["code"] == -1

    def test_login_without_device_header(self, client) -> None:
        client.post("/api/v1/users/register", json={"phone": "13800000000", "password": "secret123"})
        resp = client.post("/api/v1/auth/login", json={"phone": "13800000000", "password": "secret123"})
        assert resp.json() == {"code": -1, "msg": "unknown uuid", "data": None}

    def test_invalid_body_uses_envelope(self, client) -> None:
        resp = client.post("/api/v1/auth/login", json={"phone": ""}, headers={DEVICE_HEADER: "dev-1"})
        assert resp.status_code == 422
        assert resp.json()["code"] == -1

    def test_me_and_logout(self, client) -> None:
        headers = register_and_login(client)

        me = client.get("/api/v1/users/me", headers=headers)
        assert me.json()["data"]["phone"] == "13800000000"
        assert "password" not in me.json()["data"]

        assert client.post("/api/v1/auth/logout", headers=headers).json()["code"] == 0
        assert client.get("/api/v1/users/me", headers=headers).status_code == 401

    def test_new_device_login_kicks_old_token(self, client) -> None:
        old = register_and_login(client, device="dev-1")
        new = register_and_login(client, device="dev-2")

        assert client.get("/api/v1/users/me", headers=old).status_code == 401
        assert client.get("/api/v1/users/me", headers=new).status_code == 200


class TestArticleEndpoints:
    def test_protected_without_token(self, client) -> None:
        resp = client.get("/api/v1/articles")
        assert resp.status_code == 401
        assert resp.json()["code"] == -1

    def test_crud_flow(self, client) -> None:
        headers = register_and_login(client)

        created = client.post("/api/v1/articles", json={"title": "Hello", "content": "World"}, headers=headers)
        assert created.json()["data"] == {"id": 1}

        listed = client.get("/api/v1/articles", headers=headers).json()
        assert listed["data"]["total"] == 1

        updated = client.put("/api/v1/articles/1", json={"content": "Moon"}, headers=headers)
        assert updated.json()["code"] == 0

        detail = client.get("/api/v1/articles/1", headers=headers).json()
        assert detail["data"]["title"] == "Hello"
        assert detail["data"]["content"] == "Moon"

        assert client.delete("/api/v1/articles/1", headers=headers).json()["code"] == 0
        assert client.get("/api/v1/articles/1", headers=headers).json()["msg"] == "article not found"

    def test_root_is_public(self, client) -> None:
        assert client.get("/").json()["msg"] == "Welcome!"
