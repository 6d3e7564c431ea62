"""
User Repository - Data Access Layer for users, roles and role assignments
"""
from typing import List, Optional

from sqlalchemy import select, func, delete
from sqlalchemy.orm import Session, selectinload

from app.core.roles import RoleName, ROLE_IDS
from app.models.user import User, Role, UserRole


class UserRepository:
    """
    Repository for User and Role data access
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_role_names(self, user_id: str) -> List[RoleName]:
        """Names of the roles assigned to a user (empty for unknown users)"""
        if not user_id:
            return []

        rows = self.db.execute(
            select(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
            .order_by(Role.id)
        ).scalars().all()
        return list(rows)

    def find_all_with_roles(self) -> List[User]:
        """All users, newest first, with their roles loaded"""
        return list(
            self.db.execute(
                select(User)
                .options(selectinload(User.roles).selectinload(UserRole.role))
                .order_by(User.created_at.desc(), User.id)
            ).scalars().all()
        )

    def ensure_user(self, user_id: str, email: Optional[str] = None, name: Optional[str] = None) -> User:
        """
        Return the user row, creating it when missing

        Existing rows are left untouched.
        """
        user = self.find_by_id(user_id)
        if user is None:
            user = User(id=user_id, email=email, name=name)
            self.db.add(user)
            self.db.flush()
        return user

    def fill_profile(self, user: User, email: Optional[str] = None, name: Optional[str] = None) -> User:
        """Set email/name only where the row has none"""
        if user.email is None and email:
            user.email = email
        if user.name is None and name:
            user.name = name
        self.db.flush()
        return user

    def find_role(self, role_name: RoleName) -> Optional[Role]:
        return self.db.execute(select(Role).where(Role.name == role_name)).scalar_one_or_none()

    def find_user_role(self, user_id: str, role_id: int) -> Optional[UserRole]:
        return self.db.execute(
            select(UserRole).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        ).scalar_one_or_none()

    def upsert_user_role(self, user_id: str, role_id: int, assigned_by: Optional[str] = None) -> UserRole:
        """Create the user-role link, or refresh assigned_by if it already exists"""
        user_role = self.find_user_role(user_id, role_id)
        if user_role is None:
            user_role = UserRole(user_id=user_id, role_id=role_id, assigned_by=assigned_by)
            self.db.add(user_role)
        else:
            user_role.assigned_by = assigned_by
        self.db.flush()
        return user_role

    def remove_user_role(self, user_id: str, role_id: int) -> bool:
        result = self.db.execute(
            delete(UserRole)
            .where(UserRole.user_id == user_id, UserRole.role_id == role_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def ensure_roles(self) -> List[Role]:
        """Create any missing role rows with their fixed ids"""
        roles = []
        for role_name, role_id in ROLE_IDS.items():
            role = self.find_role(role_name)
            if role is None:
                role = Role(id=role_id, name=role_name)
                self.db.add(role)
            roles.append(role)
        self.db.flush()
        return roles

    def count(self) -> int:
        return self.db.execute(select(func.count(User.id))).scalar_one()
