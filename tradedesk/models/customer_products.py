# tradedesk/models/customer_products.py

from sqlalchemy import CheckConstraint, Column, Integer, ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship

from tradedesk.database import Base


class CustomerProduct(Base):
    __tablename__ = "customer_products"

    id = Column(Integer, primary_key=True, index=True)

    customer_id = Column(
        Integer,
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    price_per_kilo = Column(Numeric(10, 2), nullable=False)

    customer = relationship("Customer", back_populates="prices")
    product = relationship("Product", back_populates="prices")

    __table_args__ = (
        UniqueConstraint("customer_id", "product_id", name="uq_customer_product"),
        CheckConstraint("price_per_kilo > 0", name="ck_price_per_kilo_positive"),
    )
