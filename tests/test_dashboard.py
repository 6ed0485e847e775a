def test_empty_dashboard(client):
    body = client.get("/dashboard").json()

    assert body["stats"] == {"customers": 0, "products": 0, "users": 0, "total_sales": 0}
    assert body["sales_data"] == []
    assert body["customers_data"] == []
    assert body["products_data"] == []


def test_dashboard_aggregates(client, customer_a, customer_b, rice, beans, make_sale):
    client.post("/users", json={"name": "Admin", "email": "admin@example.com"})

    make_sale(customer_a, [(rice, 5, 100), (beans, 3, 120)], created_at="2026-01-15T10:00:00")
    make_sale(customer_b, [(rice, 10, 110)], created_at="2026-02-03T09:00:00")
    make_sale(customer_b, [(beans, 7, 130)], created_at="2025-02-20T09:00:00")

    body = client.get("/dashboard").json()

    assert body["stats"] == {"customers": 2, "products": 2, "users": 1, "total_sales": 2870}

    # Same month name in different years stays separate
    assert body["sales_data"] == [
        {"month": "Feb 2025", "sales": 910},
        {"month": "Jan 2026", "sales": 860},
        {"month": "Feb 2026", "sales": 1100},
    ]
    assert body["customers_data"] == [
        {"name": "Customer B", "value": 2010},
        {"name": "Customer A", "value": 860},
    ]
    assert body["products_data"] == [
        {"name": "Rice", "sales": 1600},
        {"name": "Beans", "sales": 1270},
    ]
