"""
Seed the database with two products, two customers with
custom prices and a handful of sales.

    python -m tradedesk.seed
"""

import logging
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

import tradedesk.models  # noqa: F401
from tradedesk.database import Base, SessionLocal, engine
from tradedesk.models import Customer, CustomerProduct, Product, Sale, SaleProduct

logger = logging.getLogger("app")


def _sale(customer, product, kilos, price_per_kilo):
    quantity = Decimal(kilos)
    price = Decimal(price_per_kilo)
    return Sale(
        customer=customer,
        total=price * quantity,
        items=[SaleProduct(product=product, quantity=quantity, price=price)],
    )


def seed(db):
    rice = Product(name="Rice", capital_per_kilo=Decimal("50"))
    beans = Product(name="Beans", capital_per_kilo=Decimal("80"))

    customer_a = Customer(name="Customer A", email="a@example.com")
    customer_b = Customer(name="Customer B", email="b@example.com")

    db.add_all([rice, beans, customer_a, customer_b])

    db.add_all([
        CustomerProduct(customer=customer_a, product=rice, price_per_kilo=Decimal("100")),
        CustomerProduct(customer=customer_a, product=beans, price_per_kilo=Decimal("120")),
        CustomerProduct(customer=customer_b, product=rice, price_per_kilo=Decimal("110")),
        CustomerProduct(customer=customer_b, product=beans, price_per_kilo=Decimal("130")),
    ])

    db.add_all([
        _sale(customer_a, rice, 5, 100),
        _sale(customer_a, beans, 3, 120),
        _sale(customer_b, rice, 10, 110),
        _sale(customer_b, beans, 7, 130),
    ])

    db.commit()


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if db.query(Product).count():
            logger.info("Database already has products, skipping seed")
            return
        seed(db)
        logger.info("Seed data inserted")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Seeding failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
