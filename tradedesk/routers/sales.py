# =========================================================
# SALES ROUTER
#
# - A sale belongs to one customer and carries line items
#   (product, kilos, price per kilo at time of sale)
# - The total is always computed from the line items
# - Sale + line items are written in one transaction
# - created_at can be backdated on create and update
# =========================================================

import logging
from decimal import Decimal, ROUND_HALF_UP
from datetime import date, datetime, timezone
from calendar import monthrange

from fastapi import APIRouter, Depends, HTTPException, Query, status, Request
from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy.exc import SQLAlchemyError

from tradedesk.database import get_db
from tradedesk.models.customers import Customer
from tradedesk.models.products import Product
from tradedesk.models.sales import Sale
from tradedesk.models.sale_products import SaleProduct
from tradedesk.schemas.sale import SaleCreate, SaleUpdate, SaleItemCreate, SaleResponse
from tradedesk.core.config import settings
from tradedesk.core.rate_limiter import limiter

logger = logging.getLogger("app")

router = APIRouter(prefix="/sales", tags=["Sales"])

# Client totals may differ from the computed one by rounding only
TOTAL_TOLERANCE = Decimal("0.01")
CENT = Decimal("0.01")

# Sale.total is Numeric(12, 2)
MAX_SALE_TOTAL = Decimal("9999999999.99")


def sales_query(db: Session):
    """Sales with customer, items and item products loaded."""
    return db.query(Sale).options(
        joinedload(Sale.customer),
        selectinload(Sale.items).joinedload(SaleProduct.product),
    )


def month_bounds(month: int, year: int) -> tuple[datetime, datetime]:
    last_day = monthrange(year, month)[1]
    start_dt = datetime.combine(date(year, month, 1), datetime.min.time())
    end_dt = datetime.combine(date(year, month, last_day), datetime.max.time())
    return start_dt, end_dt


def year_bounds(year: int) -> tuple[datetime, datetime]:
    start_dt = datetime.combine(date(year, 1, 1), datetime.min.time())
    end_dt = datetime.combine(date(year, 12, 31), datetime.max.time())
    return start_dt, end_dt


def _get_sale_or_404(db: Session, sale_id: int) -> Sale:
    sale = sales_query(db).filter(Sale.id == sale_id).first()

    if not sale:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Sale not found",
        )

    return sale


def _ensure_customer(db: Session, customer_id: int):
    if not db.query(Customer.id).filter(Customer.id == customer_id).first():
        raise HTTPException(status_code=404, detail="Customer not found")


def _build_items(db: Session, items: list[SaleItemCreate]) -> tuple[list[SaleProduct], Decimal]:
    if not items:
        raise HTTPException(status_code=400, detail="Sale must contain items")

    product_ids = [item.product_id for item in items]
    if len(product_ids) != len(set(product_ids)):
        raise HTTPException(status_code=400, detail="Duplicate products in sale are not allowed")

    found = {
        product_id
        for (product_id,) in db.query(Product.id).filter(Product.id.in_(product_ids)).all()
    }
    missing = [product_id for product_id in product_ids if product_id not in found]
    if missing:
        raise HTTPException(status_code=404, detail=f"Product not found: {missing[0]}")

    total = Decimal("0.00")
    sale_items = []

    for item in items:
        total += line_total(item.price, item.quantity)
        sale_items.append(
            SaleProduct(
                product_id=item.product_id,
                quantity=item.quantity,
                price=item.price,
            )
        )

    if total > MAX_SALE_TOTAL:
        raise HTTPException(
            status_code=400,
            detail=f"Sale total {total} exceeds the maximum of {MAX_SALE_TOTAL}",
        )

    return sale_items, total


def line_total(price, quantity) -> Decimal:
    return (Decimal(price) * Decimal(quantity)).quantize(CENT, rounding=ROUND_HALF_UP)


def _check_total(claimed: Decimal | None, computed: Decimal):
    if claimed is None:
        return

    if abs(claimed - computed) > TOTAL_TOLERANCE:
        raise HTTPException(
            status_code=400,
            detail=f"Sale total {claimed} does not match line items total {computed}",
        )


# =========================================================
# CREATE SALE
# =========================================================
@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.SALES_RATE_LIMIT)
def create_sale(
    request: Request,
    sale_data: SaleCreate,
    db: Session = Depends(get_db),
):
    _ensure_customer(db, sale_data.customer_id)

    sale_items, total = _build_items(db, sale_data.items)
    _check_total(sale_data.total, total)

    try:
        sale = Sale(
            customer_id=sale_data.customer_id,
            total=total,
            items=sale_items,
        )
        if sale_data.created_at is not None:
            sale.created_at = sale_data.created_at

        db.add(sale)
        db.commit()

    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create sale")
        raise HTTPException(status_code=500, detail="Unable to complete sale")

    return _get_sale_or_404(db, sale.id)


# =========================================================
# LIST SALES
# =========================================================
@router.get("", response_model=list[SaleResponse])
def list_sales(
    db: Session = Depends(get_db),
    customer_id: int | None = Query(None),
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None, ge=1970, le=9999),
    limit: int | None = Query(None, ge=1, le=1000),
    offset: int = Query(0, ge=0),
):
    query = sales_query(db)

    if customer_id is not None:
        query = query.filter(Sale.customer_id == customer_id)

    if month is not None:
        start_dt, end_dt = month_bounds(month, year or datetime.now(timezone.utc).year)
        query = query.filter(Sale.created_at.between(start_dt, end_dt))
    elif year is not None:
        start_dt, end_dt = year_bounds(year)
        query = query.filter(Sale.created_at.between(start_dt, end_dt))

    query = query.order_by(Sale.created_at.desc(), Sale.id.desc()).offset(offset)

    if limit is not None:
        query = query.limit(limit)

    return query.all()


# =========================================================
# GET SINGLE SALE
# =========================================================
@router.get("/{sale_id}", response_model=SaleResponse)
def get_sale(
    sale_id: int,
    db: Session = Depends(get_db),
):
    return _get_sale_or_404(db, sale_id)


# =========================================================
# UPDATE SALE
# =========================================================
@router.put("/{sale_id}", response_model=SaleResponse)
def update_sale(
    sale_id: int,
    sale_data: SaleUpdate,
    db: Session = Depends(get_db),
):
    sale = _get_sale_or_404(db, sale_id)

    if sale_data.customer_id is not None:
        _ensure_customer(db, sale_data.customer_id)

    if sale_data.items is not None:
        new_items, total = _build_items(db, sale_data.items)
    else:
        new_items = None
        total = sum(
            (line_total(item.price, item.quantity) for item in sale.items),
            Decimal("0.00"),
        )

    _check_total(sale_data.total, total)

    try:
        if sale_data.customer_id is not None:
            sale.customer_id = sale_data.customer_id

        if sale_data.created_at is not None:
            sale.created_at = sale_data.created_at

        # Replacing the collection orphans (deletes) the old items
        if new_items is not None:
            sale.items = new_items

        sale.total = total
        db.commit()

    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update sale %s", sale_id)
        raise HTTPException(status_code=500, detail="Unable to update sale")

    db.expire_all()
    return _get_sale_or_404(db, sale_id)


# =========================================================
# DELETE SALE
# =========================================================
@router.delete("/{sale_id}")
def delete_sale(
    sale_id: int,
    db: Session = Depends(get_db),
):
    sale = _get_sale_or_404(db, sale_id)

    try:
        db.delete(sale)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete sale %s", sale_id)
        raise HTTPException(status_code=500, detail="Unable to delete sale")

    logger.info(f"Deleted sale {sale_id}")

    return {"message": "Sale deleted"}
