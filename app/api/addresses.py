"""
Addresses API Endpoints
Shipping address book of the signed-in user
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.auth import UserContext, require_customer
from app.core.database import get_db
from app.domain.address import AddressCreate, AddressUpdate
from app.services.address_service import AddressService

router = APIRouter()


@router.get("/")
async def get_addresses(
    user: UserContext = Depends(require_customer),
    db: Session = Depends(get_db)
):
    addresses = AddressService(db).list_addresses(user.user_id)

    return {
        "status": "success",
        "count": len(addresses),
        "data": [address.to_dict() for address in addresses]
    }


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_address(
    payload: AddressCreate,
    user: UserContext = Depends(require_customer),
    db: Session = Depends(get_db)
):
    address = AddressService(db).create_address(user.user_id, payload)
    return {"status": "success", "data": address.to_dict()}


@router.put("/{address_id}")
async def update_address(
    address_id: int,
    payload: AddressUpdate,
    user: UserContext = Depends(require_customer),
    db: Session = Depends(get_db)
):
    address = AddressService(db).update_address(user.user_id, address_id, payload)
    return {"status": "success", "data": address.to_dict()}


@router.post("/{address_id}/default")
async def set_default_address(
    address_id: int,
    user: UserContext = Depends(require_customer),
    db: Session = Depends(get_db)
):
    address = AddressService(db).set_default(user.user_id, address_id)
    return {"status": "success", "data": address.to_dict()}


@router.delete("/{address_id}")
async def delete_address(
    address_id: int,
    user: UserContext = Depends(require_customer),
    db: Session = Depends(get_db)
):
    AddressService(db).delete_address(user.user_id, address_id)
    return {"success": True}
