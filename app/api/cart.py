"""
Cart API Endpoints
The signed-in user's shopping cart
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import UserContext, require_customer
from app.core.database import get_db
from app.domain.cart import CartItemAdd, CartItemUpdate, CartMergeRequest
from app.services.cart_service import CartService

router = APIRouter()


@router.get("/")
async def get_cart(
    user: UserContext = Depends(require_customer),
    db: Session = Depends(get_db)
):
    """
    Get the current user's cart, creating one if it doesn't exist

    Includes total price and item count
    """
    cart = CartService(db).get_cart(user.user_id)

    return {
        "status": "success",
        "data": cart.to_dict()
    }


@router.post("/items")
async def add_item(
    payload: CartItemAdd,
    user: UserContext = Depends(require_customer),
    db: Session = Depends(get_db)
):
    """Add an item to the cart or increase its quantity if it's already there"""
    item = CartService(db).add_item(user.user_id, payload.product_id, payload.quantity)

    return {
        "status": "success",
        "data": item.to_dict()
    }


@router.patch("/items/{item_id}")
async def update_item_quantity(
    item_id: int,
    payload: CartItemUpdate,
    user: UserContext = Depends(require_customer),
    db: Session = Depends(get_db)
):
    """Set the quantity of an item in the user's cart"""
    item = CartService(db).update_item_quantity(user.user_id, item_id, payload.quantity)

    return {
        "status": "success",
        "data": item.to_dict()
    }


@router.delete("/items/{item_id}")
async def remove_item(
    item_id: int,
    user: UserContext = Depends(require_customer),
    db: Session = Depends(get_db)
):
    """Remove an item from the cart"""
    item = CartService(db).remove_item(user.user_id, item_id)

    return {
        "status": "success",
        "data": item.to_dict()
    }


@router.delete("/")
async def clear_cart(
    user: UserContext = Depends(require_customer),
    db: Session = Depends(get_db)
):
    """Remove all items from the user's cart"""
    CartService(db).clear_cart(user.user_id)
    return {"success": True}


@router.post("/merge")
async def merge_cart(
    payload: CartMergeRequest,
    user: UserContext = Depends(require_customer),
    db: Session = Depends(get_db)
):
    """Merge the items of a guest cart into the user's cart (after sign in)"""
    result = CartService(db).merge_items(user.user_id, payload.items)

    return {
        "status": "success",
        "skipped_product_ids": result["skipped_product_ids"],
        "data": result["cart"].to_dict()
    }
