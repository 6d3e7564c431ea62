"""
Authentication dependencies for the Storefront backend
Verifies Firebase ID tokens and loads the user's roles from the database
"""
import logging
from typing import Iterable, List, Optional

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import APIKeyHeader, HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.firebase import FirebaseAuthClient, get_auth_client
from app.core.roles import RoleName, SELLER_ROLES, ADMIN_ROLES, SUPER_ADMIN_ROLES
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

# Token sources: x-firebase-token header, bearer token, firebaseIdToken cookie
FIREBASE_TOKEN_HEADER = "x-firebase-token"
FIREBASE_TOKEN_COOKIE = "firebaseIdToken"

firebase_token_header = APIKeyHeader(name=FIREBASE_TOKEN_HEADER, auto_error=False)
security = HTTPBearer(auto_error=False)


class UserContext(BaseModel):
    """Verified caller identity (anonymous when user_id is None)"""
    user_id: Optional[str] = None
    roles: List[RoleName] = []

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def has_any_role(self, roles: Iterable[RoleName]) -> bool:
        return any(role in self.roles for role in roles)


def extract_token(
    request: Request,
    header_token: Optional[str] = None,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
) -> Optional[str]:
    """First token found in header, bearer credentials or cookie"""
    if header_token:
        return header_token
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(FIREBASE_TOKEN_COOKIE) or None


def get_user_context(
    request: Request,
    header_token: Optional[str] = Depends(firebase_token_header),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
    auth_client: FirebaseAuthClient = Depends(get_auth_client),
) -> UserContext:
    """
    Dependency resolving the caller, never raising.

    A missing or invalid token yields an anonymous context. If the role
    lookup fails the user stays authenticated with no roles.
    """
    token = extract_token(request, header_token, credentials)
    if not token:
        return UserContext()

    decoded = auth_client.verify_token(token)
    user_id = decoded.get("uid") if decoded else None
    if not user_id:
        logger.info("Token verification failed or UID missing")
        return UserContext()

    try:
        roles = UserRepository(db).get_role_names(user_id)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching user roles for {user_id}: {e}")
        db.rollback()
        roles = []

    return UserContext(user_id=user_id, roles=roles)


def get_current_user(user: UserContext = Depends(get_user_context)) -> UserContext:
    """
    Dependency that requires an authenticated user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: UserContext = Depends(get_current_user)):
            return {"message": f"Hello {user.user_id}"}
    """
    if not user.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return user


def require_roles(*allowed_roles: RoleName):
    """
    Dependency factory for role-based access control.

    The caller must be authenticated and hold at least one of the roles.

    Usage:
        @router.delete("/products/{product_id}")
        async def delete_product(
            product_id: int,
            user: UserContext = Depends(require_roles(RoleName.ADMIN))
        ):
            pass
    """
    async def role_checker(user: UserContext = Depends(get_current_user)) -> UserContext:
        if not user.has_any_role(allowed_roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"User does not have required role(s): {', '.join(role.value for role in allowed_roles)}"
            )
        return user

    return role_checker


def is_admin(user: UserContext) -> bool:
    return user.has_any_role(ADMIN_ROLES)


# Route guards
require_customer = get_current_user  # Any logged-in user
require_seller = require_roles(*SELLER_ROLES)
require_admin = require_roles(*ADMIN_ROLES)
require_super_admin = require_roles(*SUPER_ADMIN_ROLES)
