"""
Products API Endpoints
Public catalog queries and seller/admin product management
"""
from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from sqlalchemy.orm import Session

from app.core.auth import UserContext, require_seller
from app.core.database import get_db
from app.domain.product import ProductCreate, ProductUpdate
from app.services.product_service import ProductService

router = APIRouter()


@router.get("/")
async def get_products(
    search: Optional[str] = Query(None, description="Search by product name"),
    in_stock: Optional[bool] = Query(None, description="Only products with (true) or without (false) stock"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """
    Get products for the public storefront, newest first

    Returns public fields only (no creator information)
    """
    products, total = ProductService(db).list_public(search=search, in_stock=in_stock, limit=limit, offset=offset)

    return {
        "status": "success",
        "total": total,
        "limit": limit,
        "offset": offset,
        "count": len(products),
        "data": [product.to_dict() for product in products]
    }


@router.get("/mine")
async def get_my_products(
    user: UserContext = Depends(require_seller),
    db: Session = Depends(get_db)
):
    """Products created by the signed-in seller"""
    products = ProductService(db).list_for_creator(user.user_id)

    return {
        "status": "success",
        "count": len(products),
        "data": [product.to_dict() for product in products]
    }


@router.get("/{product_id}")
async def get_product(product_id: int, db: Session = Depends(get_db)):
    """Get a single product by ID"""
    product = ProductService(db).get_product(product_id)

    return {
        "status": "success",
        "data": product.to_dict()
    }


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    user: UserContext = Depends(require_seller),
    db: Session = Depends(get_db)
):
    """Create a product owned by the signed-in seller/admin"""
    product = ProductService(db).create_product(user, payload)

    return {
        "status": "success",
        "message": f"Product {product.id} created",
        "data": product.to_dict()
    }


@router.put("/{product_id}")
async def update_product(
    product_id: int,
    payload: ProductUpdate,
    user: UserContext = Depends(require_seller),
    db: Session = Depends(get_db)
):
    """
    Update a product

    Admins can update any product, sellers only their own.
    """
    product = ProductService(db).update_product(user, product_id, payload)

    return {
        "status": "success",
        "message": f"Product {product_id} updated",
        "data": product.to_dict()
    }


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    user: UserContext = Depends(require_seller),
    db: Session = Depends(get_db)
):
    """
    Delete a product

    Admins can delete any product, sellers only their own.
    """
    ProductService(db).delete_product(user, product_id)

    return {"success": True}
