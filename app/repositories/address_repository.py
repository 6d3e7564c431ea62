"""
Address Repository - Data Access Layer for shipping addresses
"""
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.models.address import Address


class AddressRepository:

    def __init__(self, db: Session):
        self.db = db

    def find_by_user(self, user_id: str) -> List[Address]:
        """User's addresses, default first, then newest"""
        return list(
            self.db.execute(
                select(Address)
                .where(Address.user_id == user_id)
                .order_by(Address.is_default.desc(), Address.created_at.desc(), Address.id.desc())
            ).scalars().all()
        )

    def find_for_user(self, address_id: int, user_id: str) -> Optional[Address]:
        return self.db.execute(
            select(Address).where(Address.id == address_id, Address.user_id == user_id)
        ).scalar_one_or_none()

    def create(self, user_id: str, **data) -> Address:
        address = Address(user_id=user_id, **data)
        self.db.add(address)
        self.db.flush()
        return address

    def update(self, address: Address, data: dict) -> Address:
        for field, value in data.items():
            setattr(address, field, value)
        self.db.flush()
        return address

    def delete(self, address: Address):
        self.db.delete(address)
        self.db.flush()

    def clear_default(self, user_id: str, exclude_id: Optional[int] = None):
        """Unset the default flag on the user's other addresses"""
        conditions = [Address.user_id == user_id, Address.is_default.is_(True)]
        if exclude_id is not None:
            conditions.append(Address.id != exclude_id)

        self.db.execute(
            update(Address)
            .where(*conditions)
            .values(is_default=False)
            .execution_options(synchronize_session=False)
        )
