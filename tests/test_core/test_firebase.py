"""
Unit tests for the Firebase Admin SDK wrapper

firebase_admin calls are patched; no network access.
"""
import json
from types import SimpleNamespace
from unittest.mock import patch, Mock

from firebase_admin import auth as firebase_auth

from app.core.config import Settings
from app.core.firebase import FirebaseAuthClient, FirebaseUser, initialize_firebase, load_firebase_credentials


class TestFirebaseAuthClient:

    def test_uninitialized_client_verifies_nothing(self):
        client = FirebaseAuthClient(None)

        assert client.is_initialized is False
        assert client.verify_token("any") is None
        assert client.get_user("uid") is None

    @patch("app.core.firebase.firebase_auth.verify_id_token")
    def test_verify_token(self, mock_verify):
        mock_verify.return_value = {"uid": "abc"}
        client = FirebaseAuthClient(Mock())

        assert client.verify_token("good") == {"uid": "abc"}
        assert client.verify_token("") is None
        mock_verify.assert_called_once()

    @patch("app.core.firebase.firebase_auth.verify_id_token")
    def test_verify_token_failure_returns_none(self, mock_verify):
        mock_verify.side_effect = ValueError("malformed token")

        assert FirebaseAuthClient(Mock()).verify_token("bad") is None

    @patch("app.core.firebase.firebase_auth.get_user")
    def test_get_user(self, mock_get_user):
        mock_get_user.return_value = SimpleNamespace(uid="abc", email="a@example.com", display_name="Ana")

        user = FirebaseAuthClient(Mock()).get_user("abc")

        assert user == FirebaseUser(uid="abc", email="a@example.com", display_name="Ana")

    @patch("app.core.firebase.firebase_auth.get_user")
    def test_get_missing_user(self, mock_get_user):
        mock_get_user.side_effect = firebase_auth.UserNotFoundError("No user record found")

        assert FirebaseAuthClient(Mock()).get_user("ghost") is None


class TestLoadCredentials:

    def test_not_configured(self):
        assert load_firebase_credentials(Settings(_env_file=None)) is None

    @patch("app.core.firebase.credentials.Certificate")
    def test_json_credentials(self, mock_certificate):
        config = Settings(_env_file=None, FIREBASE_CREDENTIALS=json.dumps({"project_id": "shop"}))

        load_firebase_credentials(config)

        mock_certificate.assert_called_once_with({"project_id": "shop"})

    @patch("app.core.firebase.credentials.Certificate")
    def test_split_credentials_restore_newlines(self, mock_certificate):
        config = Settings(
            _env_file=None,
            FIREBASE_PROJECT_ID="shop",
            FIREBASE_CLIENT_EMAIL="svc@shop.iam.gserviceaccount.com",
            FIREBASE_PRIVATE_KEY="-----BEGIN-----\\nKEY\\n-----END-----",
        )

        load_firebase_credentials(config)

        service_account = mock_certificate.call_args[0][0]
        assert service_account["project_id"] == "shop"
        assert service_account["private_key"] == "-----BEGIN-----\nKEY\n-----END-----"


class TestInitializeFirebase:
    """Broken credentials leave the SDK uninitialized instead of failing requests"""

    @patch.dict("firebase_admin._apps", clear=True)
    @patch("app.core.firebase.firebase_admin.initialize_app")
    def test_garbage_private_key(self, mock_initialize):
        config = Settings(
            _env_file=None,
            FIREBASE_PROJECT_ID="shop",
            FIREBASE_CLIENT_EMAIL="svc@shop.iam.gserviceaccount.com",
            FIREBASE_PRIVATE_KEY="not-a-key",
        )

        client = initialize_firebase(config)

        assert client.is_initialized is False
        assert client.verify_token("any") is None
        mock_initialize.assert_not_called()

    @patch.dict("firebase_admin._apps", clear=True)
    def test_unparsable_credentials_json(self):
        config = Settings(_env_file=None, FIREBASE_CREDENTIALS="{not json")

        assert initialize_firebase(config).is_initialized is False

    @patch.dict("firebase_admin._apps", clear=True)
    def test_missing_credentials_file(self):
        config = Settings(_env_file=None, FIREBASE_CREDENTIALS="/nonexistent/service-account.json")

        assert initialize_firebase(config).is_initialized is False

    @patch.dict("firebase_admin._apps", clear=True)
    def test_not_configured(self):
        assert initialize_firebase(Settings(_env_file=None)).is_initialized is False
