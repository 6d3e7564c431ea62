"""
Firebase Admin SDK integration

Verifies Firebase ID tokens sent by the storefront and reads user profiles
(email, display name) from Firebase Authentication.

Credentials come from settings, in this order:
- FIREBASE_CREDENTIALS: path to a service account file, or its JSON content
- FIREBASE_PROJECT_ID + FIREBASE_CLIENT_EMAIL + FIREBASE_PRIVATE_KEY

When none are configured the SDK is left uninitialized: token verification
then always fails and every request is treated as anonymous.
"""
import os
import json
import logging
from dataclasses import dataclass
from typing import Optional

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from firebase_admin import exceptions as firebase_exceptions

from .config import settings

logger = logging.getLogger(__name__)


@dataclass
class FirebaseUser:
    """Subset of the Firebase user record the backend uses"""
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None


def load_firebase_credentials(config=settings):
    """
    Build a credentials.Certificate from settings, or None if not configured
    """
    raw = config.FIREBASE_CREDENTIALS
    if raw:
        raw = raw.strip()
        if raw.startswith("{"):
            return credentials.Certificate(json.loads(raw))
        if os.path.exists(raw):
            return credentials.Certificate(raw)
        raise RuntimeError(f"FIREBASE_CREDENTIALS is neither JSON nor an existing file: {raw}")

    private_key = config.get_firebase_private_key()
    if config.FIREBASE_PROJECT_ID and config.FIREBASE_CLIENT_EMAIL and private_key:
        return credentials.Certificate({
            "type": "service_account",
            "project_id": config.FIREBASE_PROJECT_ID,
            "client_email": config.FIREBASE_CLIENT_EMAIL,
            "private_key": private_key,
            "token_uri": "https://oauth2.googleapis.com/token",
        })

    return None


class FirebaseAuthClient:
    """
    Thin wrapper around firebase_admin.auth bound to one Firebase app.

    Both methods return None instead of raising: an unverifiable token is
    an anonymous request, and a missing profile only means fewer details.
    """

    def __init__(self, app: Optional[firebase_admin.App] = None):
        self.app = app

    @property
    def is_initialized(self) -> bool:
        return self.app is not None

    def verify_token(self, token: Optional[str]) -> Optional[dict]:
        if not token:
            return None
        if not self.app:
            logger.error("Firebase Admin SDK not initialized; cannot verify token")
            return None

        try:
            return firebase_auth.verify_id_token(token, app=self.app)
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            logger.warning(f"Error verifying Firebase ID token: {e}")
            return None

    def get_user(self, uid: str) -> Optional[FirebaseUser]:
        if not self.app:
            logger.error("Firebase Admin SDK not initialized; cannot fetch user")
            return None

        try:
            record = firebase_auth.get_user(uid, app=self.app)
        except firebase_auth.UserNotFoundError:
            logger.warning(f"Firebase user {uid} not found")
            return None
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            logger.error(f"Error fetching Firebase user {uid}: {e}")
            return None

        return FirebaseUser(uid=record.uid, email=record.email, display_name=record.display_name)


def initialize_firebase(config=settings) -> FirebaseAuthClient:
    """Initialize the default Firebase app (once) and return a client for it"""
    if firebase_admin._apps:
        return FirebaseAuthClient(firebase_admin.get_app())

    try:
        cred = load_firebase_credentials(config)
        if cred is None:
            logger.warning("Firebase Admin SDK credentials not set. Skipping initialization.")
            return FirebaseAuthClient(None)

        app = firebase_admin.initialize_app(cred)
    except (ValueError, OSError, RuntimeError) as e:
        logger.error(f"Failed to initialize Firebase Admin SDK: {e}")
        return FirebaseAuthClient(None)

    logger.info("Firebase Admin SDK initialized")
    return FirebaseAuthClient(app)


_auth_client: Optional[FirebaseAuthClient] = None


def get_auth_client() -> FirebaseAuthClient:
    """
    FastAPI dependency returning the process-wide Firebase client

    Tests override this dependency with a fake client.
    """
    global _auth_client
    if _auth_client is None:
        _auth_client = initialize_firebase()
    return _auth_client
