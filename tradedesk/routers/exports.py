from datetime import datetime, timezone
from decimal import Decimal
from io import BytesIO

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from openpyxl import Workbook
from fastapi.responses import StreamingResponse

from tradedesk.database import get_db
from tradedesk.core import analytics
from tradedesk.core.config import settings
from tradedesk.core.rate_limiter import limiter
from tradedesk.models.sales import Sale
from tradedesk.routers.sales import line_total, month_bounds, sales_query, year_bounds

router = APIRouter(prefix="/exports", tags=["Exports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# =========================================================
# EXPORT ROUTE
# =========================================================
@router.get("/sales")
@limiter.limit(settings.EXPORT_RATE_LIMIT)
def export_sales(
    request: Request,
    db: Session = Depends(get_db),
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None, ge=1970, le=9999),
):
    query = sales_query(db)

    if month is not None:
        year = year or datetime.now(timezone.utc).year
        start_dt, end_dt = month_bounds(month, year)
        query = query.filter(Sale.created_at.between(start_dt, end_dt))
        filename = f"sales_{year}-{month:02d}.xlsx"
        scope = analytics.scope_label(month, year)
    elif year is not None:
        start_dt, end_dt = year_bounds(year)
        query = query.filter(Sale.created_at.between(start_dt, end_dt))
        filename = f"sales_{year}.xlsx"
        scope = str(year)
    else:
        filename = "sales_all_time.xlsx"
        scope = analytics.scope_label(None, None)

    sales = query.order_by(Sale.created_at, Sale.id).all()

    return _build_excel(
        sales=sales,
        scope=scope,
        filename=filename,
    )


# =========================================================
# EXCEL BUILDER
# =========================================================
def _build_excel(sales: list[Sale], scope: str, filename: str):
    currency = settings.CURRENCY_SYMBOL

    workbook = Workbook()

    # =======================
    # SHEET 1 - RAW SALES
    # =======================
    sheet = workbook.active
    sheet.title = "Sales Data"

    sheet.append([
        "Date",
        "Sale ID",
        "Customer",
        "Product",
        "Kilos",
        "Price per Kilo",
        "Line Total",
        "Capital",
        "Net",
    ])

    for sale in sales:
        customer_name = sale.customer.name if sale.customer else "Deleted customer"

        for item in sale.items:
            quantity = Decimal(item.quantity)
            price = Decimal(item.price)
            capital = Decimal(item.product.capital_per_kilo) if item.product else Decimal("0.00")

            sheet.append([
                sale.created_at.strftime("%Y-%m-%d"),
                sale.id,
                customer_name,
                item.product.name if item.product else "Deleted product",
                float(quantity),
                float(price),
                float(line_total(price, quantity)),
                float(capital * quantity),
                float((price - capital) * quantity),
            ])

    # =======================
    # SHEET 2 - BUSINESS SUMMARY
    # =======================
    summary = workbook.create_sheet(title="Business Summary")

    totals = analytics.summarize(sales)
    top_customers = analytics.rank_customers(sales, limit=1)
    top_products = analytics.rank_products(sales, limit=1)

    summary.append(["Period", scope])
    summary.append([])
    summary.append([f"Gross Sales ({currency})", float(totals["gross_sales"])])
    summary.append([f"Net Sales ({currency})", float(totals["net_sales"])])
    summary.append(["Profit (%)", float(totals["profit_percentage"])])
    summary.append(["Number of Sales", len(sales)])
    summary.append(["Top Customer", top_customers[0]["name"] if top_customers else "N/A"])
    summary.append(["Top Product", top_products[0]["name"] if top_products else "N/A"])

    # =======================
    # RETURN FILE
    # =======================
    output = BytesIO()
    workbook.save(output)
    output.seek(0)

    return StreamingResponse(
        output,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
