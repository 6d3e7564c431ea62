"""
Address Service
Shipping address book, one default address per user
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.domain.address import Address, AddressCreate, AddressUpdate
from app.repositories.address_repository import AddressRepository
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AddressService:

    def __init__(self, db: Session):
        self.db = db
        self.addresses = AddressRepository(db)
        self.users = UserRepository(db)

    def _get_owned(self, user_id: str, address_id: int):
        address = self.addresses.find_for_user(address_id, user_id)
        if address is None:
            raise NotFoundError("Address not found")
        return address

    def list_addresses(self, user_id: str) -> List[Address]:
        return [Address.model_validate(address) for address in self.addresses.find_by_user(user_id)]

    def create_address(self, user_id: str, data: AddressCreate) -> Address:
        """The first address of a user always becomes the default"""
        values = data.model_dump()
        is_first = not self.addresses.find_by_user(user_id)

        if values["is_default"] and not is_first:
            self.addresses.clear_default(user_id)
        values["is_default"] = values["is_default"] or is_first

        self.users.ensure_user(user_id)
        address = self.addresses.create(user_id, **values)
        self.db.commit()
        return Address.model_validate(address)

    def update_address(self, user_id: str, address_id: int, data: AddressUpdate) -> Address:
        address = self._get_owned(user_id, address_id)

        changes = data.model_dump(exclude_unset=True)
        for field in ("full_name", "line1", "city", "postal_code", "country", "is_default"):
            if field in changes and changes[field] is None:
                del changes[field]

        if changes.get("is_default"):
            self.addresses.clear_default(user_id, exclude_id=address_id)

        self.addresses.update(address, changes)
        self.db.commit()
        self.db.refresh(address)
        return Address.model_validate(address)

    def set_default(self, user_id: str, address_id: int) -> Address:
        return self.update_address(user_id, address_id, AddressUpdate(is_default=True))

    def delete_address(self, user_id: str, address_id: int) -> bool:
        """Delete an address; if it was the default, the newest remaining one takes over"""
        address = self._get_owned(user_id, address_id)
        was_default = address.is_default

        self.addresses.delete(address)

        if was_default:
            remaining = self.addresses.find_by_user(user_id)
            if remaining:
                newest = max(remaining, key=lambda a: (a.created_at, a.id))
                newest.is_default = True

        self.db.commit()
        return True
