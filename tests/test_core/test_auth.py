"""
Unit tests for the authentication dependencies
"""
import asyncio
import pytest
from unittest.mock import Mock

from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.exc import OperationalError
from starlette.requests import Request

from app.core.auth import (
    UserContext,
    extract_token,
    get_current_user,
    get_user_context,
    is_admin,
    require_roles,
    require_seller,
)
from app.core.roles import RoleName


def make_request(cookie=None):
    headers = []
    if cookie:
        headers.append((b"cookie", cookie.encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


class TestExtractToken:

    def test_header_wins(self):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="bearer-token")
        assert extract_token(make_request(), "header-token", credentials) == "header-token"

    def test_bearer_then_cookie(self):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="bearer-token")
        assert extract_token(make_request("firebaseIdToken=cookie-token"), None, credentials) == "bearer-token"
        assert extract_token(make_request("firebaseIdToken=cookie-token"), None, None) == "cookie-token"

    def test_no_token(self):
        assert extract_token(make_request(), None, None) is None


class TestUserContext:

    def test_anonymous_without_token(self, db_session, auth_client):
        user = get_user_context(make_request(), None, None, db_session, auth_client)

        assert user.is_authenticated is False
        assert user.roles == []

    def test_invalid_token_is_anonymous(self, db_session, auth_client):
        user = get_user_context(make_request(), "forged", None, db_session, auth_client)
        assert user.user_id is None

    def test_roles_loaded_from_database(self, db_session, auth_client, make_user):
        headers = make_user("seller-1", RoleName.SELLER)

        user = get_user_context(make_request(), headers["x-firebase-token"], None, db_session, auth_client)

        assert user.user_id == "seller-1"
        assert user.roles == [RoleName.SELLER]

    def test_role_lookup_failure_keeps_user_without_roles(self, auth_client):
        """Test a database error while loading roles degrades to no roles"""
        token = auth_client.register("user-1")
        db = Mock()
        db.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        user = get_user_context(make_request(), token, None, db, auth_client)

        assert user.user_id == "user-1"
        assert user.roles == []
        db.rollback.assert_called_once()


class TestGuards:

    def test_get_current_user_rejects_anonymous(self):
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(UserContext())
        assert exc_info.value.status_code == 401

    def test_require_roles_accepts_any_listed_role(self):
        checker = require_roles(RoleName.ADMIN, RoleName.SUPER_ADMIN)
        user = UserContext(user_id="u1", roles=[RoleName.CUSTOMER, RoleName.SUPER_ADMIN])

        assert asyncio.run(checker(user=user)) is user

    def test_require_roles_rejects_missing_role(self):
        user = UserContext(user_id="u1", roles=[RoleName.CUSTOMER])

        with pytest.raises(HTTPException) as exc_info:
            asyncio.run(require_seller(user=user))

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "User does not have required role(s): SELLER, ADMIN, SUPER_ADMIN"

    def test_is_admin(self):
        assert is_admin(UserContext(user_id="u1", roles=[RoleName.ADMIN]))
        assert is_admin(UserContext(user_id="u1", roles=[RoleName.SUPER_ADMIN]))
        assert not is_admin(UserContext(user_id="u1", roles=[RoleName.SELLER]))
