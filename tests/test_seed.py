from tradedesk.models import CustomerProduct, Product
from tradedesk.seed import seed


def test_seed_data(client, db):
    seed(db)

    assert db.query(Product).count() == 2
    assert db.query(CustomerProduct).count() == 4

    stats = client.get("/dashboard").json()["stats"]
    assert stats["customers"] == 2
    assert stats["total_sales"] == 500 + 360 + 1100 + 910

    customers = {customer["name"]: customer["id"] for customer in client.get("/customers").json()}
    prices = client.get(f"/customers/{customers['Customer B']}/products").json()
    assert {row["name"]: row["price_per_kilo"] for row in prices} == {"Rice": 110, "Beans": 130}
