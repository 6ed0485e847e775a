# =========================================================
# SALES ANALYTICS
#
# Pure aggregation over loaded Sale rows:
# - Gross / net sales and profit %
# - Rolling 12 month rollups (gross and net)
# - Same-day month over month comparison
# - Business summary (counts, averages, ranges, highs/lows)
# - Customer and product rankings
#
# Every function takes sales already fetched with their
# customer and items (+ item.product) relationships.
# Money is always Decimal, percentages quantized to 0.01
# =========================================================

from calendar import monthrange
from datetime import date, datetime, timezone
from decimal import Decimal

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def _money(value) -> Decimal:
    if value is None:
        return ZERO
    return Decimal(value)


def _percentage(part: Decimal, whole: Decimal) -> Decimal:
    if whole == 0:
        return ZERO
    return ((part / whole) * 100).quantize(CENT)


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _sale_date(sale) -> date:
    created_at = sale.created_at
    if isinstance(created_at, datetime):
        return created_at.date()
    return created_at


def _today(today: date | None) -> date:
    return today or datetime.now(timezone.utc).date()


# =========================================================
# GROSS / NET
# =========================================================
def sale_gross(sale) -> Decimal:
    return _money(sale.total)


def sale_net(sale) -> Decimal:
    """Sale revenue minus the capital of every kilo sold."""
    net = ZERO
    for item in sale.items:
        cost = item.product.capital_per_kilo if item.product is not None else None
        net += (_money(item.price) - _money(cost)) * _money(item.quantity)
    return net


def gross_sales(sales) -> Decimal:
    return sum((sale_gross(sale) for sale in sales), ZERO)


def net_sales(sales) -> Decimal:
    return sum((sale_net(sale) for sale in sales), ZERO)


def profit_percentage(gross: Decimal, net: Decimal) -> Decimal:
    return _percentage(net, gross)


def summarize(sales) -> dict:
    gross = gross_sales(sales)
    net = net_sales(sales)
    return {
        "gross_sales": gross,
        "net_sales": net,
        "profit_percentage": profit_percentage(gross, net),
    }


# =========================================================
# FILTERING
# =========================================================
def filter_by_month(sales, month: int | None, year: int | None = None) -> list:
    if month is None:
        return list(sales)

    selected = []
    for sale in sales:
        sold_on = _sale_date(sale)
        if sold_on.month != month:
            continue
        if year is not None and sold_on.year != year:
            continue
        selected.append(sale)
    return selected


def filter_by_period(sales, start_date: date, end_date: date) -> list:
    return [sale for sale in sales if start_date <= _sale_date(sale) <= end_date]


def scope_label(month: int | None, year: int | None) -> str:
    if month is None:
        return "All time"
    label = date(year or 2000, month, 1).strftime("%b")
    return f"{label} {year}" if year is not None else label


# =========================================================
# MONTHLY ROLLUP
# =========================================================
def month_window(today: date | None = None, before: int = 6, size: int = 12) -> list[tuple[int, int]]:
    """Months from `before` months ago, current month included."""
    today = _today(today)
    return [
        _shift_month(today.year, today.month, offset - before)
        for offset in range(size)
    ]


def monthly_rollup(sales, today: date | None = None, value=sale_gross) -> list[dict]:
    totals: dict[tuple[int, int], Decimal] = {}
    for sale in sales:
        sold_on = _sale_date(sale)
        key = (sold_on.year, sold_on.month)
        totals[key] = totals.get(key, ZERO) + value(sale)

    buckets = []
    for year, month in month_window(today):
        first_day = date(year, month, 1)
        buckets.append({
            "key": first_day.strftime("%Y-%m"),
            "month": first_day.strftime("%b %Y"),
            "total": totals.get((year, month), ZERO),
        })
    return buckets


# =========================================================
# SAME-DAY MONTH COMPARISON
# =========================================================
def _month_to_day(sales, year: int, month: int, day: int) -> dict:
    last_day = monthrange(year, month)[1]
    start_date = date(year, month, 1)
    end_date = date(year, month, min(day, last_day))

    totals = summarize(filter_by_period(sales, start_date, end_date))
    totals["start_date"] = start_date
    totals["end_date"] = end_date
    return totals


def month_comparison(sales, today: date | None = None) -> dict:
    """
    Current month up to today's day number against the previous
    calendar month cut at the same day number.
    """
    today = _today(today)
    previous_year, previous_month = _shift_month(today.year, today.month, -1)

    current = _month_to_day(sales, today.year, today.month, today.day)
    previous = _month_to_day(sales, previous_year, previous_month, today.day)

    gross_change = current["gross_sales"] - previous["gross_sales"]
    net_change = current["net_sales"] - previous["net_sales"]

    return {
        "current": current,
        "previous": previous,
        "gross_change": gross_change,
        "gross_change_percentage": _percentage(gross_change, previous["gross_sales"]),
        "net_change": net_change,
        "net_change_percentage": _percentage(net_change, previous["net_sales"]),
    }


# =========================================================
# BUSINESS SUMMARY
# =========================================================
def _highlight(sale) -> dict | None:
    if sale is None:
        return None
    customer = sale.customer
    return {
        "sale_id": sale.id,
        "total": sale_gross(sale),
        "customer_name": customer.name if customer is not None else "N/A",
    }


def _days_in_scope(sales, today: date, month: int | None, year: int | None) -> int:
    if month is not None:
        return monthrange(year or today.year, month)[1]

    if not sales:
        return 1

    earliest = min(_sale_date(sale) for sale in sales)
    return max(1, (today - earliest).days + 1)


def business_summary(sales, today: date | None = None, month: int | None = None, year: int | None = None) -> dict:
    today = _today(today)
    sales = list(sales)
    count = len(sales)

    if count == 0:
        return {
            "total_sales": 0,
            "average_sales_per_day": ZERO,
            "average_sale_value": ZERO,
            "min_sale_value": ZERO,
            "max_sale_value": ZERO,
            "average_profit_per_sale": ZERO,
            "min_profit_per_sale": ZERO,
            "max_profit_per_sale": ZERO,
            "highest_sale": None,
            "lowest_sale": None,
        }

    totals = [sale_gross(sale) for sale in sales]
    profits = [sale_net(sale) for sale in sales]

    # First occurrence wins on ties
    highest = sales[totals.index(max(totals))]
    lowest = sales[totals.index(min(totals))]

    days = _days_in_scope(sales, today, month, year)

    return {
        "total_sales": count,
        "average_sales_per_day": (Decimal(count) / days).quantize(CENT),
        "average_sale_value": (sum(totals, ZERO) / count).quantize(CENT),
        "min_sale_value": min(totals),
        "max_sale_value": max(totals),
        "average_profit_per_sale": (sum(profits, ZERO) / count).quantize(CENT),
        "min_profit_per_sale": min(profits),
        "max_profit_per_sale": max(profits),
        "highest_sale": _highlight(highest),
        "lowest_sale": _highlight(lowest),
    }


# =========================================================
# RANKINGS
# =========================================================
def _ranked(entries: dict, limit: int | None) -> list[dict]:
    ranked = sorted(
        entries.values(),
        key=lambda entry: (-entry["gross_sales"], entry["name"]),
    )
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


def rank_customers(sales, limit: int | None = 5) -> list[dict]:
    entries: dict = {}
    for sale in sales:
        customer = sale.customer
        key = sale.customer_id
        if key not in entries:
            entries[key] = {
                "id": key,
                "name": customer.name if customer is not None else f"Customer {key}",
                "gross_sales": ZERO,
                "net_sales": ZERO,
                "quantity": ZERO,
            }
        entry = entries[key]
        entry["gross_sales"] += sale_gross(sale)
        entry["net_sales"] += sale_net(sale)
        entry["quantity"] += sum((_money(item.quantity) for item in sale.items), ZERO)
    return _ranked(entries, limit)


def rank_products(sales, limit: int | None = 5) -> list[dict]:
    entries: dict = {}
    for sale in sales:
        for item in sale.items:
            product = item.product
            key = item.product_id
            if key not in entries:
                entries[key] = {
                    "id": key,
                    "name": product.name if product is not None else f"Product {key}",
                    "gross_sales": ZERO,
                    "net_sales": ZERO,
                    "quantity": ZERO,
                }
            cost = product.capital_per_kilo if product is not None else None
            quantity = _money(item.quantity)
            price = _money(item.price)

            entry = entries[key]
            entry["gross_sales"] += price * quantity
            entry["net_sales"] += (price - _money(cost)) * quantity
            entry["quantity"] += quantity
    return _ranked(entries, limit)


# =========================================================
# FULL ANALYTICS PAYLOAD
# =========================================================
def build_analytics(sales, today: date | None = None, month: int | None = None, year: int | None = None, top: int = 5) -> dict:
    today = _today(today)
    sales = list(sales)
    if month is not None and year is None:
        year = today.year

    scoped = filter_by_month(sales, month, year)

    return {
        "scope": scope_label(month, year),
        "summary": summarize(scoped),
        "monthly_gross": monthly_rollup(sales, today, sale_gross),
        "monthly_net": monthly_rollup(sales, today, sale_net),
        "comparison": month_comparison(sales, today),
        "business_summary": business_summary(scoped, today, month, year),
        "top_customers": rank_customers(scoped, top),
        "top_products": rank_products(scoped, top),
    }
