# =========================================================
# DASHBOARD ROUTER
#
# Headline counts plus the three dashboard charts:
# - Sales per calendar month (chronological)
# - Sales value per customer
# - Sales value per product (sum of price * kilos)
# =========================================================

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from tradedesk.database import get_db
from tradedesk.models.customers import Customer
from tradedesk.models.products import Product
from tradedesk.models.sales import Sale
from tradedesk.models.sale_products import SaleProduct
from tradedesk.models.users import User
from tradedesk.schemas.dashboard import DashboardResponse

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def _sales_by_month(db: Session):
    rows = db.query(Sale.created_at, Sale.total).all()

    totals: dict[tuple[int, int], Decimal] = {}
    for created_at, total in rows:
        key = (created_at.year, created_at.month)
        totals[key] = totals.get(key, Decimal("0.00")) + Decimal(total or 0)

    return [
        {
            "month": date(year, month, 1).strftime("%b %Y"),
            "sales": totals[(year, month)],
        }
        for year, month in sorted(totals)
    ]


def _sales_by_customer(db: Session):
    customer_total = func.coalesce(func.sum(Sale.total), 0)

    rows = (
        db.query(Customer.name, customer_total.label("value"))
        .join(Sale, Sale.customer_id == Customer.id)
        .group_by(Customer.id, Customer.name)
        .order_by(customer_total.desc(), Customer.name)
        .all()
    )

    return [{"name": row.name, "value": Decimal(row.value or 0)} for row in rows]


def _sales_by_product(db: Session):
    product_total = func.coalesce(func.sum(SaleProduct.price * SaleProduct.quantity), 0)

    rows = (
        db.query(Product.name, product_total.label("sales"))
        .join(SaleProduct, SaleProduct.product_id == Product.id)
        .group_by(Product.id, Product.name)
        .order_by(product_total.desc(), Product.name)
        .all()
    )

    return [{"name": row.name, "sales": Decimal(row.sales or 0)} for row in rows]


@router.get("", response_model=DashboardResponse)
def dashboard(db: Session = Depends(get_db)):
    total_sales = (
        db.query(func.coalesce(func.sum(Sale.total), 0))
        .scalar()
    )

    return {
        "stats": {
            "customers": db.query(func.count(Customer.id)).scalar(),
            "products": db.query(func.count(Product.id)).scalar(),
            "users": db.query(func.count(User.id)).scalar(),
            "total_sales": Decimal(total_sales or 0),
        },
        "sales_data": _sales_by_month(db),
        "customers_data": _sales_by_customer(db),
        "products_data": _sales_by_product(db),
    }
