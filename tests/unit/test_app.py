import json
from unittest.mock import Mock

import pytest
from flask import Flask
from google.api_core import exceptions as google_exceptions

from planboard import create_owner as create_owner_module
from planboard import firebase_utils
from planboard.config.settings import Settings
from planboard.middleware.error_middleware import register_error_handlers
from planboard.utils.errors import DuplicateSlugError


class TestHealth:
    def test_health(self, client):
        body = client.get("/").get_json()
        assert body["status"] == "ok"
        assert body["firebase"] == "not configured"
        assert body["menus"] == "polling"

    def test_unknown_route_is_json_404(self, client):
        resp = client.get("/api/nothing-here")
        assert resp.status_code == 404
        assert resp.get_json()["code"] == "NOT_FOUND"


class TestErrorHandlers:
    @pytest.fixture
    def error_app(self):
        app = Flask("test_errors")
        register_error_handlers(app)

        @app.get("/domain")
        def domain():
            raise DuplicateSlugError("Slug 'a' is already used", details={"slug": "a"})

        @app.get("/firestore")
        def firestore_down():
            raise google_exceptions.DeadlineExceeded("slow")

        @app.get("/boom")
        def boom():
            raise RuntimeError("boom")

        return app.test_client()

    def test_domain_error(self, error_app):
        resp = error_app.get("/domain")
        assert resp.status_code == 409
        body = resp.get_json()
        assert body["code"] == "DUPLICATE_SLUG"
        assert body["details"] == {"slug": "a"}

    def test_firestore_error(self, error_app):
        resp = error_app.get("/firestore")
        assert resp.status_code == 503
        assert resp.get_json()["code"] == "TRANSPORT_ERROR"

    def test_unexpected_error_hides_message(self, error_app):
        resp = error_app.get("/boom")
        assert resp.status_code == 500
        assert resp.get_json()["error"] == "An unexpected error occurred"


class TestSettings:
    def test_validate_dev_mode(self, monkeypatch):
        monkeypatch.setattr(Settings, "DEV_MODE", True)
        monkeypatch.setattr(Settings, "SECRET_KEY", None)
        assert Settings.validate() is True

    def test_validate_requires_secrets_outside_dev(self, monkeypatch):
        monkeypatch.setattr(Settings, "DEV_MODE", False)
        monkeypatch.setattr(Settings, "SECRET_KEY", None)
        monkeypatch.setattr(Settings, "FIREBASE_PROJECT_ID", None)
        with pytest.raises(ValueError, match="SECRET_KEY"):
            Settings.validate()

    def test_short_secret(self, monkeypatch):
        monkeypatch.setattr(Settings, "DEV_MODE", True)
        monkeypatch.setattr(Settings, "SECRET_KEY", "short")
        with pytest.raises(ValueError, match="32 characters"):
            Settings.validate()


class TestFirebaseCredentials:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for var in firebase_utils.CREDENTIAL_ENV_VARS + ("FIREBASE_PROJECT_ID", "FIREBASE_PRIVATE_KEY"):
            monkeypatch.delenv(var, raising=False)

    def test_json_string(self, monkeypatch):
        monkeypatch.setenv("FIREBASE_CREDENTIALS_JSON", json.dumps({"project_id": "p"}))
        assert firebase_utils.get_firebase_credentials() == {"project_id": "p"}

    def test_file_path(self, monkeypatch, tmp_path):
        path = tmp_path / "sa.json"
        path.write_text(json.dumps({"project_id": "from-file"}))
        monkeypatch.setenv("FIREBASE_CREDENTIALS_PATH", str(path))
        assert firebase_utils.get_firebase_credentials()["project_id"] == "from-file"

    def test_individual_fields(self, monkeypatch):
        monkeypatch.setenv("FIREBASE_PROJECT_ID", "p")
        monkeypatch.setenv("FIREBASE_PRIVATE_KEY", "line1\\nline2")
        creds = firebase_utils.get_firebase_credentials()
        assert creds["private_key"] == "line1\nline2"

    def test_nothing_configured(self):
        with pytest.raises(ValueError):
            firebase_utils.get_firebase_credentials()

    def test_init_skipped_in_dev_mode(self):
        assert firebase_utils.init_firebase(dev_mode=True) is False


class TestCreateOwner:
    def test_creates_admin_profile(self, db, monkeypatch):
        create_user = Mock(return_value=Mock(uid="owner-uid"))
        monkeypatch.setattr(create_owner_module.firebase_auth, "create_user", create_user)
        monkeypatch.setattr(create_owner_module.firebase_auth, "set_custom_user_claims", Mock())

        profile = create_owner_module.create_owner(db, "Boss@Example.com", "secret123")

        assert profile["role"] == "admin"
        assert profile["name"] == "boss"
        assert db.data("users", "owner-uid")["email"] == "boss@example.com"

    def test_rolls_back_auth_user_when_profile_fails(self, db, monkeypatch):
        monkeypatch.setattr(create_owner_module.firebase_auth, "create_user", Mock(return_value=Mock(uid="u1")))
        delete_user = Mock()
        monkeypatch.setattr(create_owner_module.firebase_auth, "delete_user", delete_user)
        db.failing.add("set")

        with pytest.raises(google_exceptions.ServiceUnavailable):
            create_owner_module.create_owner(db, "boss@example.com", "secret123")
        delete_user.assert_called_once_with("u1")

    def test_rejects_short_password(self, db):
        with pytest.raises(ValueError):
            create_owner_module.create_owner(db, "boss@example.com", "123")

    def test_main_without_firebase(self, monkeypatch):
        monkeypatch.setattr(create_owner_module, "init_firebase", lambda: False)
        assert create_owner_module.main(["--email", "boss@example.com", "--password", "secret123"]) == 1
