"""
Seed the roles table with SUPER_ADMIN, ADMIN, SELLER and CUSTOMER

Role ids are fixed (1..4) so role checks and permission tables stay stable
across environments. Existing roles are left untouched.

Usage:
    python3 scripts/seed_roles.py [--dry-run]

Options:
    --dry-run   : Show which roles would be created without writing
"""
import os
import sys
import argparse
import logging

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from dotenv import load_dotenv
load_dotenv()

from sqlalchemy.orm import Session

from app.core.roles import ROLE_IDS
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


def missing_roles(session: Session):
    """(name, id) pairs of the roles not yet in the database"""
    repo = UserRepository(session)
    return [(name, role_id) for name, role_id in ROLE_IDS.items() if repo.find_role(name) is None]


def seed_roles(session: Session) -> int:
    """
    Create the missing roles and commit

    Returns:
        Number of roles created
    """
    created = len(missing_roles(session))
    UserRepository(session).ensure_roles()
    session.commit()
    logger.info(f"Roles seeded ({created} created)")
    return created


def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed the roles table")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be done without writing")
    args = parser.parse_args(argv)

    from app.core.database import SessionLocal

    session = SessionLocal()
    try:
        pending = missing_roles(session)
        if not pending:
            print("✅ All roles already exist")
            return 0

        for name, role_id in pending:
            print(f"  {'Would create' if args.dry_run else 'Creating'} role {name.value} (id={role_id})")

        if args.dry_run:
            print(f"🔍 Dry run: {len(pending)} role(s) missing, nothing written")
            return 0

        created = seed_roles(session)
        print(f"✅ Created {created} role(s)")
        return 0
    finally:
        session.close()


if __name__ == "__main__":
    sys.exit(main())
