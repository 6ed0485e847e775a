# =========================================================
# CUSTOMER PRICING ROUTER
#
# GET  /customers/{id}/products
#   Every product with the customer's price per kilo
#   (capital when no custom price is set) and how many
#   kilos the customer has bought, most bought first
#
# PUT  /customers/{id}/products
#   Body: {"<product_id>": <price_per_kilo>, ...}
#   Upserts custom prices, retail must beat capital
# =========================================================

import logging
from decimal import Decimal, InvalidOperation

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from tradedesk.database import get_db
from tradedesk.models.customer_products import CustomerProduct
from tradedesk.models.products import Product
from tradedesk.models.sales import Sale
from tradedesk.models.sale_products import SaleProduct
from tradedesk.routers.customers import get_customer_or_404
from tradedesk.schemas.pricing import CustomerProductPrice, PriceUpdateResponse

logger = logging.getLogger("app")

router = APIRouter(
    prefix="/customers/{customer_id}/products",
    tags=["Customer Pricing"],
)

CENT = Decimal("0.01")

# CustomerProduct.price_per_kilo is Numeric(10, 2)
MAX_PRICE = Decimal("100000000")


def _parse_price_entries(body: dict) -> dict[int, Decimal]:
    """Keep only entries whose product id and price are numeric."""
    entries = {}

    for raw_product_id, raw_price in body.items():
        try:
            product_id = int(raw_product_id)
            price = Decimal(str(raw_price))
        except (TypeError, ValueError, InvalidOperation):
            continue

        if not price.is_finite():
            continue

        entries[product_id] = price

    return entries


# =========================================================
# LIST PRODUCTS WITH CUSTOMER PRICES
# =========================================================
@router.get("", response_model=list[CustomerProductPrice])
def list_customer_products(
    customer_id: int,
    db: Session = Depends(get_db),
):
    get_customer_or_404(db, customer_id)

    products = db.query(Product).order_by(Product.id).all()

    custom_prices = dict(
        db.query(CustomerProduct.product_id, CustomerProduct.price_per_kilo)
        .filter(CustomerProduct.customer_id == customer_id)
        .all()
    )

    purchased = dict(
        db.query(
            SaleProduct.product_id,
            func.coalesce(func.sum(SaleProduct.quantity), 0),
        )
        .join(Sale, SaleProduct.sale_id == Sale.id)
        .filter(Sale.customer_id == customer_id)
        .group_by(SaleProduct.product_id)
        .all()
    )

    results = []

    for product in products:
        custom_price = custom_prices.get(product.id)

        results.append(
            CustomerProductPrice(
                id=product.id,
                name=product.name,
                capital_per_kilo=product.capital_per_kilo,
                price_per_kilo=custom_price if custom_price is not None else product.capital_per_kilo,
                has_custom_price=custom_price is not None,
                total_purchased=Decimal(purchased.get(product.id) or 0),
            )
        )

    # Python's sort is stable, so ties stay in product id order
    results.sort(key=lambda row: row.total_purchased, reverse=True)

    return results


# =========================================================
# UPSERT CUSTOMER PRICES
# =========================================================
@router.put("", response_model=PriceUpdateResponse)
def update_customer_prices(
    customer_id: int,
    prices: dict = Body(..., examples=[{"1": 100, "2": 120}]),
    db: Session = Depends(get_db),
):
    get_customer_or_404(db, customer_id)

    entries = _parse_price_entries(prices)

    if not entries:
        return {"message": "Prices updated successfully!", "updates": []}

    products = {
        product.id: product
        for product in db.query(Product).filter(Product.id.in_(entries.keys())).all()
    }

    missing = sorted(set(entries) - set(products))
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product not found: {', '.join(str(product_id) for product_id in missing)}",
        )

    # Business rule: retail price must be higher than capital
    for product_id, price in entries.items():
        product = products[product_id]
        if price != price.quantize(CENT) or price >= MAX_PRICE:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Retail price for {product.name} must have at most 2 decimal places and be below {MAX_PRICE}",
            )

        if price <= product.capital_per_kilo:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Retail price for {product.name} must be higher than {product.capital_per_kilo}",
            )

    existing = {
        row.product_id: row
        for row in db.query(CustomerProduct)
        .filter(
            CustomerProduct.customer_id == customer_id,
            CustomerProduct.product_id.in_(entries.keys()),
        )
        .all()
    }

    updates = []

    try:
        for product_id, price in entries.items():
            row = existing.get(product_id)

            if row is None:
                row = CustomerProduct(
                    customer_id=customer_id,
                    product_id=product_id,
                    price_per_kilo=price,
                )
                db.add(row)
            else:
                row.price_per_kilo = price

            updates.append(row)

        db.commit()

    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update prices for customer %s", customer_id)
        raise HTTPException(status_code=500, detail="Unable to update prices")

    for row in updates:
        db.refresh(row)

    return {"message": "Prices updated successfully!", "updates": updates}
