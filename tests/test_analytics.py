"""
Analytics aggregation tests.

Runs the aggregation functions on unsaved Sale rows with a
fixed "today" of 2026-03-15:

    s1  A  2026-03-02  rice  5 kg @ 100   total  500  net 250
    s2  A  2026-03-20  beans 3 kg @ 120   total  360  net 120
    s3  B  2026-02-10  rice 10 kg @ 110   total 1100  net 600
    s4  B  2026-02-20  beans 7 kg @ 130   total  910  net 350
    s5  B  2025-12-05  rice 2 @ 110 + beans 1 @ 130
                                          total  350  net 170
"""
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from tradedesk.core import analytics
from tradedesk.models import Customer, Product, Sale, SaleProduct

TODAY = date(2026, 3, 15)


@pytest.fixture
def catalog():
    return {
        "rice": Product(id=1, name="Rice", capital_per_kilo=Decimal("50")),
        "beans": Product(id=2, name="Beans", capital_per_kilo=Decimal("80")),
        "a": Customer(id=1, name="Customer A", email="a@example.com"),
        "b": Customer(id=2, name="Customer B", email="b@example.com"),
    }


def _sale(sale_id, customer, created_at, lines):
    items = [
        SaleProduct(
            product_id=product.id,
            product=product,
            quantity=Decimal(str(kilos)),
            price=Decimal(str(price)),
        )
        for product, kilos, price in lines
    ]
    return Sale(
        id=sale_id,
        customer_id=customer.id,
        customer=customer,
        created_at=created_at,
        total=sum((item.price * item.quantity for item in items), Decimal("0")),
        items=items,
    )


@pytest.fixture
def sales(catalog):
    rice, beans = catalog["rice"], catalog["beans"]
    a, b = catalog["a"], catalog["b"]
    return [
        _sale(1, a, datetime(2026, 3, 2, 9, 0), [(rice, 5, 100)]),
        _sale(2, a, datetime(2026, 3, 20, 9, 0), [(beans, 3, 120)]),
        _sale(3, b, datetime(2026, 2, 10, 9, 0), [(rice, 10, 110)]),
        _sale(4, b, datetime(2026, 2, 20, 9, 0), [(beans, 7, 130)]),
        _sale(5, b, datetime(2025, 12, 5, 9, 0), [(rice, 2, 110), (beans, 1, 130)]),
    ]


def test_gross_net_and_profit(sales):
    summary = analytics.summarize(sales)

    assert summary["gross_sales"] == Decimal("3220")
    assert summary["net_sales"] == Decimal("1490")
    assert summary["profit_percentage"] == Decimal("46.27")


def test_empty_sales_are_zero():
    summary = analytics.summarize([])

    assert summary == {
        "gross_sales": Decimal("0"),
        "net_sales": Decimal("0"),
        "profit_percentage": Decimal("0"),
    }


def test_net_treats_missing_product_as_zero_cost(catalog):
    sale = Sale(
        id=9,
        customer=catalog["a"],
        total=Decimal("200"),
        created_at=datetime(2026, 3, 1),
        items=[SaleProduct(product_id=99, quantity=Decimal("2"), price=Decimal("100"))],
    )

    assert analytics.sale_net(sale) == Decimal("200")


def test_missing_total_counts_as_zero(catalog):
    sale = Sale(id=9, customer=catalog["a"], created_at=datetime(2026, 3, 1), items=[])

    assert analytics.gross_sales([sale]) == Decimal("0")


def test_filter_by_month(sales):
    march = analytics.filter_by_month(sales, 3, 2026)
    assert [sale.id for sale in march] == [1, 2]

    assert analytics.filter_by_month(sales, 3, 2025) == []
    assert len(analytics.filter_by_month(sales, None)) == 5

    # Without a year the month matches in any year
    assert [sale.id for sale in analytics.filter_by_month(sales, 12)] == [5]


def test_monthly_rollup_window(sales):
    buckets = analytics.monthly_rollup(sales, TODAY)

    assert len(buckets) == 12
    assert buckets[0]["key"] == "2025-09"
    assert buckets[6] == {"key": "2026-03", "month": "Mar 2026", "total": Decimal("860")}
    assert buckets[-1]["key"] == "2026-08"

    totals = {bucket["key"]: bucket["total"] for bucket in buckets}
    assert totals["2026-02"] == Decimal("2010")
    assert totals["2025-12"] == Decimal("350")
    assert totals["2026-01"] == Decimal("0")


def test_monthly_net_rollup(sales):
    buckets = analytics.monthly_rollup(sales, TODAY, analytics.sale_net)

    totals = {bucket["key"]: bucket["total"] for bucket in buckets}
    assert totals["2026-03"] == Decimal("370")
    assert totals["2026-02"] == Decimal("950")


def test_month_window_crosses_year():
    window = analytics.month_window(date(2026, 2, 1))

    assert window[0] == (2025, 8)
    assert window[6] == (2026, 2)
    assert window[-1] == (2026, 7)


def test_same_day_comparison(sales):
    comparison = analytics.month_comparison(sales, TODAY)

    current, previous = comparison["current"], comparison["previous"]
    assert (current["start_date"], current["end_date"]) == (date(2026, 3, 1), date(2026, 3, 15))
    assert (previous["start_date"], previous["end_date"]) == (date(2026, 2, 1), date(2026, 2, 15))

    # s2 (Mar 20) and s4 (Feb 20) are past the day cutoff
    assert current["gross_sales"] == Decimal("500")
    assert current["net_sales"] == Decimal("250")
    assert previous["gross_sales"] == Decimal("1100")
    assert previous["net_sales"] == Decimal("600")

    assert comparison["gross_change"] == Decimal("-600")
    assert comparison["gross_change_percentage"] == Decimal("-54.55")
    assert comparison["net_change"] == Decimal("-350")
    assert comparison["net_change_percentage"] == Decimal("-58.33")


def test_comparison_in_january_uses_previous_december(sales):
    comparison = analytics.month_comparison(sales, date(2026, 1, 10))

    assert comparison["previous"]["start_date"] == date(2025, 12, 1)
    assert comparison["previous"]["gross_sales"] == Decimal("350")
    assert comparison["current"]["gross_sales"] == Decimal("0")
    assert comparison["gross_change_percentage"] == Decimal("-100.00")


def test_comparison_cutoff_clamps_to_short_month(sales, catalog):
    late_february = _sale(6, catalog["a"], datetime(2026, 2, 28, 18, 0), [(catalog["rice"], 1, 100)])

    comparison = analytics.month_comparison(sales + [late_february], date(2026, 3, 31))

    assert comparison["previous"]["end_date"] == date(2026, 2, 28)
    assert comparison["previous"]["gross_sales"] == Decimal("2110")


def test_comparison_without_previous_sales_has_zero_percentage(sales):
    comparison = analytics.month_comparison(sales[:1], TODAY)

    assert comparison["gross_change"] == Decimal("500")
    assert comparison["gross_change_percentage"] == Decimal("0")


def test_business_summary_for_a_month(sales):
    march = analytics.filter_by_month(sales, 3, 2026)

    summary = analytics.business_summary(march, TODAY, 3, 2026)

    assert summary["total_sales"] == 2
    assert summary["average_sales_per_day"] == Decimal("0.06")
    assert summary["average_sale_value"] == Decimal("430.00")
    assert summary["min_sale_value"] == Decimal("360")
    assert summary["max_sale_value"] == Decimal("500")
    assert summary["average_profit_per_sale"] == Decimal("185.00")
    assert summary["min_profit_per_sale"] == Decimal("120")
    assert summary["max_profit_per_sale"] == Decimal("250")
    assert summary["highest_sale"] == {"sale_id": 1, "total": Decimal("500"), "customer_name": "Customer A"}
    assert summary["lowest_sale"]["sale_id"] == 2


def test_business_summary_all_time_counts_days_since_first_sale(sales):
    summary = analytics.business_summary(sales, TODAY)

    # 2025-12-05 .. 2026-03-15 inclusive is 101 days
    assert summary["average_sales_per_day"] == Decimal("0.05")
    assert summary["highest_sale"]["customer_name"] == "Customer B"
    assert summary["lowest_sale"]["total"] == Decimal("350")


def test_business_summary_ties_keep_first_sale(catalog):
    rice = catalog["rice"]
    first = _sale(1, catalog["a"], datetime(2026, 3, 1), [(rice, 1, 100)])
    second = _sale(2, catalog["b"], datetime(2026, 3, 2), [(rice, 1, 100)])

    summary = analytics.business_summary([first, second], TODAY)

    assert summary["highest_sale"]["sale_id"] == 1
    assert summary["lowest_sale"]["sale_id"] == 1


def test_business_summary_without_sales():
    summary = analytics.business_summary([], TODAY)

    assert summary["total_sales"] == 0
    assert summary["highest_sale"] is None
    assert summary["lowest_sale"] is None
    assert summary["average_sale_value"] == Decimal("0")


def test_rank_customers(sales):
    ranked = analytics.rank_customers(sales)

    assert [entry["name"] for entry in ranked] == ["Customer B", "Customer A"]
    assert ranked[0]["gross_sales"] == Decimal("2360")
    assert ranked[0]["net_sales"] == Decimal("1120")
    assert ranked[0]["quantity"] == Decimal("20")
    assert ranked[1]["gross_sales"] == Decimal("860")


def test_rank_products(sales):
    ranked = analytics.rank_products(sales)

    assert [entry["name"] for entry in ranked] == ["Rice", "Beans"]
    assert ranked[0]["gross_sales"] == Decimal("1820")
    assert ranked[0]["net_sales"] == Decimal("970")
    assert ranked[0]["quantity"] == Decimal("17")
    assert ranked[1]["gross_sales"] == Decimal("1400")

    assert len(analytics.rank_products(sales, limit=1)) == 1


def test_rank_ties_break_by_name(catalog):
    rice = catalog["rice"]
    zed = Customer(id=3, name="Zed", email="z@example.com")
    amy = Customer(id=4, name="Amy", email="amy@example.com")

    ranked = analytics.rank_customers([
        _sale(1, zed, datetime(2026, 3, 1), [(rice, 1, 100)]),
        _sale(2, amy, datetime(2026, 3, 2), [(rice, 1, 100)]),
    ])

    assert [entry["name"] for entry in ranked] == ["Amy", "Zed"]


def test_build_analytics_month_scope_defaults_to_current_year(sales):
    payload = analytics.build_analytics(sales, today=TODAY, month=3)

    assert payload["scope"] == "Mar 2026"
    assert payload["summary"]["gross_sales"] == Decimal("860")
    assert payload["business_summary"]["total_sales"] == 2
    assert [entry["name"] for entry in payload["top_customers"]] == ["Customer A"]

    # Trend and comparison always use every sale
    assert len(payload["monthly_gross"]) == 12
    assert payload["comparison"]["previous"]["gross_sales"] == Decimal("1100")


def test_build_analytics_all_time(sales):
    payload = analytics.build_analytics(sales, today=TODAY)

    assert payload["scope"] == "All time"
    assert payload["summary"]["net_sales"] == Decimal("1490")


def test_analytics_endpoint(client, customer_a, rice, beans, make_sale):
    now = datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)
    make_sale(customer_a, [(rice, 5, 100), (beans, 3, 120)], created_at=now.isoformat())

    response = client.get("/analytics")

    assert response.status_code == 200
    body = response.json()
    assert body["scope"] == "All time"
    assert Decimal(str(body["summary"]["gross_sales"])) == Decimal("860")
    assert Decimal(str(body["summary"]["net_sales"])) == Decimal("370")
    assert Decimal(str(body["comparison"]["current"]["gross_sales"])) == Decimal("860")
    assert body["business_summary"]["highest_sale"]["customer_name"] == "Customer A"
    assert [entry["name"] for entry in body["top_products"]] == ["Rice", "Beans"]
    assert len(body["monthly_gross"]) == 12


def test_analytics_endpoint_month_scope(client, customer_a, rice, make_sale):
    make_sale(customer_a, [(rice, 5, 100)], created_at="2024-06-10T10:00:00")

    body = client.get("/analytics", params={"month": 6, "year": 2024}).json()

    assert body["scope"] == "Jun 2024"
    assert body["business_summary"]["total_sales"] == 1
    assert client.get("/analytics", params={"month": 0}).status_code == 422
