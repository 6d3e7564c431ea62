"""
Admin API - Dashboard Endpoints
Store-wide statistics for the admin panel
"""
from fastapi import APIRouter, Depends, Query
from datetime import datetime
from typing import Dict, Any
from sqlalchemy.orm import Session

from app.core.auth import UserContext, require_admin
from app.core.database import get_db
from app.domain.product import Product
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.user_repository import UserRepository

router = APIRouter()


@router.get("/stats")
async def get_stats(
    low_stock_threshold: int = Query(5, ge=0, description="Stock level considered low"),
    user: UserContext = Depends(require_admin),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Store statistics for the admin dashboard

    Returns:
        totals: users, products and orders
        orders_by_status: order count per status
        revenue: sum of order totals excluding cancelled orders
        low_stock: products at or below the threshold
    """
    orders = OrderRepository(db)
    products = ProductRepository(db)
    low_stock = products.find_low_stock(low_stock_threshold)

    return {
        "status": "success",
        "timestamp": datetime.now().isoformat(),
        "data": {
            "totals": {
                "users": UserRepository(db).count(),
                "products": products.count(),
                "orders": orders.count(),
            },
            "orders_by_status": orders.count_by_status(),
            "revenue": float(orders.total_revenue()),
            "low_stock_threshold": low_stock_threshold,
            "low_stock": [Product.model_validate(product).to_dict() for product in low_stock],
        }
    }
