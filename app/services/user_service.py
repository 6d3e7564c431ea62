"""
User Service
Profiles, role assignment and first-login profile sync
"""
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.auth import UserContext
from app.core.exceptions import InvalidRequestError, NotFoundError
from app.core.firebase import FirebaseAuthClient
from app.core.roles import RoleName, permissions_for_roles
from app.domain.user import UserProfile, UserWithRoles
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, db: Session, auth_client: FirebaseAuthClient):
        self.db = db
        self.auth_client = auth_client
        self.users = UserRepository(db)

    def get_self(self, user: UserContext) -> UserProfile:
        """Caller's id and roles plus the latest email/name from Firebase"""
        firebase_user = self.auth_client.get_user(user.user_id)
        return UserProfile(
            id=user.user_id,
            roles=user.roles,
            email=firebase_user.email if firebase_user else None,
            name=firebase_user.display_name if firebase_user else None,
        )

    def get_permissions(self, user: UserContext) -> dict:
        return permissions_for_roles(user.roles)

    def list_users(self) -> List[UserWithRoles]:
        return [UserWithRoles.from_orm_user(user) for user in self.users.find_all_with_roles()]

    def assign_role(self, actor: UserContext, user_id: str, role_name: RoleName) -> bool:
        """
        Give a role to a user, creating the user row if needed

        Raises:
            InvalidRequestError: the role row does not exist (roles not seeded)
        """
        role = self.users.find_role(role_name)
        if role is None:
            raise InvalidRequestError("Role not found")

        self.users.ensure_user(user_id)
        self.users.upsert_user_role(user_id, role.id, assigned_by=actor.user_id)
        self.db.commit()

        logger.info(f"Assigned role {role_name.value} to user {user_id} by {actor.user_id}")
        return True

    def revoke_role(self, actor: UserContext, user_id: str, role_name: RoleName) -> bool:
        if user_id == actor.user_id and role_name == RoleName.SUPER_ADMIN:
            raise InvalidRequestError("You cannot remove your own SUPER_ADMIN role")

        role = self.users.find_role(role_name)
        if role is None or not self.users.remove_user_role(user_id, role.id):
            raise NotFoundError(f"User does not have role {role_name.value}")

        self.db.commit()

        logger.info(f"Removed role {role_name.value} from user {user_id} by {actor.user_id}")
        return True

    def sync_profile(self, user: UserContext) -> dict:
        """
        Make sure the signed-in user exists locally and has a role

        New users are created from their Firebase profile; rows created
        on demand (without email/name) get the missing fields filled in.
        Users without any role get CUSTOMER.
        """
        db_user = self.users.find_by_id(user.user_id)
        if db_user is None:
            firebase_user = self.auth_client.get_user(user.user_id)
            self.users.ensure_user(
                user.user_id,
                email=firebase_user.email if firebase_user else None,
                name=firebase_user.display_name if firebase_user else None,
            )
            self.db.commit()
            logger.info(f"Created user profile in DB for {user.user_id}")
        elif db_user.email is None or db_user.name is None:
            firebase_user = self.auth_client.get_user(user.user_id)
            if firebase_user is not None:
                try:
                    self.users.fill_profile(db_user, email=firebase_user.email, name=firebase_user.display_name)
                    self.db.commit()
                except IntegrityError as e:
                    # Email already used by another local user
                    self.db.rollback()
                    logger.error(f"Failed to fill profile of {user.user_id}: {e}")
                else:
                    logger.info(f"Filled missing profile fields for {user.user_id}")

        if not user.roles:
            customer_role = self.users.find_role(RoleName.CUSTOMER)
            if customer_role is None:
                logger.error("CUSTOMER role not found in database!")
                return {"success": True, "roles": user.roles}

            try:
                self.users.upsert_user_role(user.user_id, customer_role.id)
                self.db.commit()
            except IntegrityError as e:
                # Assigned concurrently by another request
                self.db.rollback()
                logger.error(f"Failed to assign CUSTOMER role to {user.user_id}, maybe already assigned? {e}")
                return {"success": True, "roles": user.roles}

            logger.info(f"Assigned default CUSTOMER role to {user.user_id}")
            return {"success": True, "roles": [RoleName.CUSTOMER]}

        return {"success": True, "roles": user.roles}
