"""
Users API Endpoints
- Profile of the signed-in user
- User and role management (super admin only)
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import UserContext, require_customer, require_super_admin
from app.core.database import get_db
from app.core.firebase import FirebaseAuthClient, get_auth_client
from app.core.roles import RoleName
from app.domain.user import RoleAssignment
from app.services.user_service import UserService

router = APIRouter()


def get_user_service(
    db: Session = Depends(get_db),
    auth_client: FirebaseAuthClient = Depends(get_auth_client),
) -> UserService:
    return UserService(db, auth_client)


@router.get("/me")
async def get_self(
    user: UserContext = Depends(require_customer),
    service: UserService = Depends(get_user_service)
):
    """Current user's id and roles, with email and name from Firebase"""
    return {
        "status": "success",
        "data": service.get_self(user).model_dump(mode="json")
    }


@router.get("/me/permissions")
async def get_my_permissions(
    user: UserContext = Depends(require_customer),
    service: UserService = Depends(get_user_service)
):
    """Permission flags granted by the current user's roles"""
    return {
        "status": "success",
        "data": service.get_permissions(user)
    }


@router.post("/me/sync")
async def sync_profile(
    user: UserContext = Depends(require_customer),
    service: UserService = Depends(get_user_service)
):
    """
    Sync the signed-in user's profile after signup/login

    Creates the local user row if needed and assigns CUSTOMER to users
    without roles.
    """
    result = service.sync_profile(user)
    return {"success": result["success"], "roles": [role.value for role in result["roles"]]}


@router.get("/")
async def list_users(
    user: UserContext = Depends(require_super_admin),
    service: UserService = Depends(get_user_service)
):
    """All users with their roles, newest first"""
    users = service.list_users()

    return {
        "status": "success",
        "count": len(users),
        "data": [item.to_dict() for item in users]
    }


@router.post("/roles")
async def assign_role(
    payload: RoleAssignment,
    user: UserContext = Depends(require_super_admin),
    service: UserService = Depends(get_user_service)
):
    """Assign a role to a user"""
    service.assign_role(user, payload.user_id, payload.role_name)
    return {"success": True}


@router.delete("/{user_id}/roles/{role_name}")
async def revoke_role(
    user_id: str,
    role_name: RoleName,
    user: UserContext = Depends(require_super_admin),
    service: UserService = Depends(get_user_service)
):
    """Remove a role from a user"""
    service.revoke_role(user, user_id, role_name)
    return {"success": True}
