# tradedesk/routers/products.py

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from tradedesk.database import get_db
from tradedesk.models.products import Product
from tradedesk.routers.sales import line_total
from tradedesk.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
)

logger = logging.getLogger("app")

router = APIRouter(
    prefix="/products",
    tags=["Products"],
)


def _get_product_or_404(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    return product


def _ensure_name_available(db: Session, name: str, product_id: int | None = None):
    query = db.query(Product).filter(Product.name == name)
    if product_id is not None:
        query = query.filter(Product.id != product_id)

    if query.first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Product with this name already exists",
        )


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db),
):
    _ensure_name_available(db, product_data.name)

    product = Product(
        name=product_data.name,
        capital_per_kilo=product_data.capital_per_kilo,
    )

    try:
        db.add(product)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create product")
        raise HTTPException(status_code=500, detail="Unable to create product")

    db.refresh(product)

    return product


@router.get("", response_model=list[ProductResponse])
def list_products(db: Session = Depends(get_db)):
    products = (
        db.query(Product)
        .order_by(Product.id)
        .all()
    )

    return products


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return _get_product_or_404(db, product_id)


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    db: Session = Depends(get_db),
):
    product = _get_product_or_404(db, product_id)

    if product_data.name is not None:
        _ensure_name_available(db, product_data.name, product_id)
        product.name = product_data.name

    if product_data.capital_per_kilo is not None:
        product.capital_per_kilo = product_data.capital_per_kilo

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update product %s", product_id)
        raise HTTPException(status_code=500, detail="Unable to update product")

    db.refresh(product)

    return product


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
):
    product = _get_product_or_404(db, product_id)

    # Sales that lose line items must keep total == sum(price * quantity)
    affected_sales = {item.sale for item in product.sale_items}

    logger.info(f"Deleting product {product_id} from {len(affected_sales)} sales")

    try:
        for sale in affected_sales:
            sale.total = sum(
                (
                    line_total(item.price, item.quantity)
                    for item in sale.items
                    if item.product_id != product_id
                ),
                Decimal("0.00"),
            )

        db.delete(product)
        db.commit()

    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete product %s", product_id)
        raise HTTPException(status_code=500, detail="Unable to delete product")

    return {"message": "Product deleted successfully"}
