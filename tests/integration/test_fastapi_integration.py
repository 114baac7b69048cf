"""Integration tests for the FastAPI dependencies.

A small app protects ``/me`` with ``CurrentPayload`` and exposes refresh and
logout through ``CurrentAuth``; requests go through Starlette's TestClient
with the manager backed by fakeredis.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tokenguard.integrations.fastapi import CurrentAuth, CurrentPayload, init_app
from tokenguard.utils import clock
from tests.helpers.token_factory import NOW, make_claims, sign


@pytest.fixture()
def app(settings, manager):
    app = FastAPI()
    init_app(app, settings, manager=manager)

    @app.get("/me")
    def me(payload: CurrentPayload) -> dict:
        return {"sub": payload["sub"], "jti": payload["jti"]}

    @app.post("/refresh")
    def refresh(auth: CurrentAuth) -> dict:
        return {"access_token": auth.refresh()}

    @app.post("/logout", status_code=204)
    def logout(auth: CurrentAuth) -> None:
        auth.invalidate()

    return app


@pytest.fixture()
def client(app):
    with TestClient(app) as client:
        yield client


def _auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestProtectedRoute:
    def test_valid_token(self, client, frozen_now):
        resp = client.get("/me", headers=_auth_headers(sign(make_claims())))

        assert resp.status_code == 200
        assert resp.json() == {"sub": "user-1", "jti": "jti-original"}

    def test_missing_token(self, client):
        resp = client.get("/me")
        assert resp.status_code == 401

    def test_malformed_token(self, client):
        resp = client.get("/me", headers=_auth_headers("garbage"))

        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid or expired token"
        assert resp.headers["www-authenticate"] == "Bearer"

    def test_expired_token(self, client, frozen_now):
        resp = client.get("/me", headers=_auth_headers(sign(make_claims(exp=NOW - 1))))

        assert resp.status_code == 401
        assert resp.json()["detail"] == "Token has expired"

    def test_wrong_secret(self, client, frozen_now):
        token = sign(make_claims(), secret="a-different-secret-entirely-0123456789")
        resp = client.get("/me", headers=_auth_headers(token))
        assert resp.status_code == 401


class TestRefreshAndLogout:
    def test_refresh_revokes_old_token(self, client, frozen_now):
        old = sign(make_claims())

        resp = client.post("/refresh", headers=_auth_headers(old))
        assert resp.status_code == 200
        new = resp.json()["access_token"]

        assert client.get("/me", headers=_auth_headers(new)).status_code == 200
        revoked = client.get("/me", headers=_auth_headers(old))
        assert revoked.status_code == 401
        assert revoked.json()["detail"] == "Token has been revoked"

    def test_refresh_expired_token(self, client):
        token = sign(make_claims(exp=NOW + 60))
        with clock.frozen(NOW + 3600):
            resp = client.post("/refresh", headers=_auth_headers(token))
        assert resp.status_code == 200

    def test_logout(self, client, frozen_now):
        token = sign(make_claims())

        assert client.post("/logout", headers=_auth_headers(token)).status_code == 204
        assert client.get("/me", headers=_auth_headers(token)).status_code == 401
