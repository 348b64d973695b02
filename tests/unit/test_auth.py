from unittest.mock import Mock

import pytest
import requests

from planboard.api import auth as auth_api
from planboard.config.settings import Settings


@pytest.fixture
def sign_in(monkeypatch):
    monkeypatch.setattr(Settings, "FIREBASE_WEB_API_KEY", "test-key")
    post = Mock()
    monkeypatch.setattr(auth_api.requests, "post", post)
    return post


def rest_response(ok, body):
    return Mock(ok=ok, json=Mock(return_value=body))


class TestLogin:
    def test_success_returns_profile_and_token(self, client, sign_in):
        sign_in.return_value = rest_response(True, {"idToken": "id-token", "localId": "admin-1"})
        resp = client.post("/api/auth/login", json={"email": "Owner@Example.com", "password": "secret1"})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["firebaseToken"] == "id-token"
        assert body["user"]["role"] == "admin"

        _, kwargs = sign_in.call_args
        assert kwargs["json"]["email"] == "owner@example.com"
        assert kwargs["params"] == {"key": "test-key"}

    def test_user_without_profile_is_member(self, client, sign_in):
        sign_in.return_value = rest_response(True, {"idToken": "t", "localId": "new-user"})
        body = client.post("/api/auth/login", json={"email": "new@example.com", "password": "secret1"}).get_json()
        assert body["user"]["role"] == "member"
        assert body["user"]["name"] == "new"

    @pytest.mark.parametrize("code,message", [
        ("EMAIL_NOT_FOUND", "No account found with this email"),
        ("INVALID_PASSWORD", "Incorrect password"),
        ("USER_DISABLED", "This account has been disabled"),
        ("INVALID_LOGIN_CREDENTIALS", "Invalid credentials"),
    ])
    def test_firebase_errors_are_mapped(self, client, sign_in, code, message):
        sign_in.return_value = rest_response(False, {"error": {"message": code}})
        resp = client.post("/api/auth/login", json={"email": "a@example.com", "password": "x"})
        assert resp.status_code == 401
        assert resp.get_json()["error"] == message

    def test_missing_fields(self, client, sign_in):
        assert client.post("/api/auth/login", json={"email": "a@example.com"}).status_code == 400
        sign_in.assert_not_called()

    def test_auth_service_down(self, client, sign_in):
        sign_in.side_effect = requests.ConnectionError("unreachable")
        resp = client.post("/api/auth/login", json={"email": "a@example.com", "password": "x"})
        assert resp.status_code == 503

    def test_without_api_key(self, client, monkeypatch):
        monkeypatch.setattr(Settings, "FIREBASE_WEB_API_KEY", None)
        resp = client.post("/api/auth/login", json={"email": "a@example.com", "password": "x"})
        assert resp.status_code == 503


class TestVerify:
    def test_valid_token(self, client):
        body = client.post("/api/auth/verify", json={"firebase_token": "admin-token"}).get_json()
        assert body["valid"] is True
        assert body["user"]["user_id"] == "admin-1"

    def test_invalid_token(self, client):
        resp = client.post("/api/auth/verify", json={"firebase_token": "garbage"})
        assert resp.status_code == 401
        assert resp.get_json()["valid"] is False

    def test_missing_token(self, client):
        assert client.post("/api/auth/verify", json={}).status_code == 400


class TestMiddleware:
    def test_missing_header(self, client):
        resp = client.post("/api/notifications/read-all")
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "Token is missing"

    def test_malformed_header(self, client):
        resp = client.post("/api/notifications/read-all", headers={"Authorization": "Token admin-token"})
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "Invalid token format"
