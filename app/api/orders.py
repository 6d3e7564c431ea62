"""
Orders API Endpoints
Order placement for customers and order views for sellers and admins
"""
from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from sqlalchemy.orm import Session

from app.core.auth import UserContext, require_customer, require_seller, require_admin
from app.core.database import get_db
from app.domain.order import OrderCreate, CheckoutRequest, OrderStatusUpdate
from app.models.order import OrderStatus
from app.services.order_service import OrderService

router = APIRouter()


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: OrderCreate,
    user: UserContext = Depends(require_customer),
    db: Session = Depends(get_db)
):
    """
    Place an order

    Validates stock for every product, computes the total from current
    prices, and creates the order while decrementing stock in a single
    transaction.
    """
    order = OrderService(db).create_order(user.user_id, payload.items, payload.shipping_address_id)

    return {
        "status": "success",
        "data": order.to_dict()
    }


@router.post("/checkout", status_code=status.HTTP_201_CREATED)
async def checkout(
    payload: Optional[CheckoutRequest] = None,
    user: UserContext = Depends(require_customer),
    db: Session = Depends(get_db)
):
    """Place an order with the contents of the user's cart, then empty the cart"""
    address_id = payload.shipping_address_id if payload else None
    order = OrderService(db).checkout(user.user_id, address_id)

    return {
        "status": "success",
        "data": order.to_dict()
    }


@router.get("/mine")
async def get_my_orders(
    user: UserContext = Depends(require_customer),
    db: Session = Depends(get_db)
):
    """The signed-in customer's orders, newest first"""
    orders = OrderService(db).list_for_user(user.user_id)

    return {
        "status": "success",
        "count": len(orders),
        "data": [order.to_dict() for order in orders]
    }


@router.get("/seller")
async def get_seller_orders(
    user: UserContext = Depends(require_seller),
    db: Session = Depends(get_db)
):
    """
    Orders containing products created by the signed-in seller

    Each order only lists that seller's items.
    """
    orders = OrderService(db).list_for_seller(user.user_id)

    return {
        "status": "success",
        "count": len(orders),
        "data": [order.to_dict() for order in orders]
    }


@router.get("/")
async def get_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status", description="Filter by order status"),
    user_id: Optional[str] = Query(None, description="Filter by customer"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    user: UserContext = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """All orders (admin), newest first, with customer and item information"""
    orders, total = OrderService(db).list_all(status=status_filter, user_id=user_id, limit=limit, offset=offset)

    return {
        "status": "success",
        "total": total,
        "limit": limit,
        "offset": offset,
        "count": len(orders),
        "data": [order.to_dict() for order in orders]
    }


@router.get("/{order_id}")
async def get_order(
    order_id: int,
    user: UserContext = Depends(require_customer),
    db: Session = Depends(get_db)
):
    """A single order, visible to its owner and to admins"""
    order = OrderService(db).get_order(user, order_id)

    return {
        "status": "success",
        "data": order.to_dict()
    }


@router.patch("/{order_id}/status")
async def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    user: UserContext = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Set an order's status (admin)"""
    order = OrderService(db).update_status(order_id, payload.status, changed_by=user.user_id)

    return {
        "status": "success",
        "message": f"Order {order_id} is now {order.status.value}",
        "data": order.to_dict()
    }
