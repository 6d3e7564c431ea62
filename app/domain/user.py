"""
User Domain Models
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from app.core.roles import RoleName
from app.domain.common import DomainModel


class UserProfile(BaseModel):
    """The signed-in user as returned by /users/me"""
    id: str
    roles: List[RoleName] = []
    email: Optional[str] = None
    name: Optional[str] = None


class UserWithRoles(DomainModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    roles: List[RoleName] = []
    created_at: Optional[datetime] = None

    @classmethod
    def from_orm_user(cls, user) -> "UserWithRoles":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            roles=user.role_names,
            created_at=user.created_at,
        )


class RoleAssignment(BaseModel):
    user_id: str = Field(..., min_length=1, description="User ID cannot be empty")
    role_name: RoleName
