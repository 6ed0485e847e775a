# tradedesk/models/products.py

from sqlalchemy import CheckConstraint, Column, Integer, String, Numeric, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from tradedesk.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)

    # Cost basis of one kilo
    capital_per_kilo = Column(Numeric(10, 2), nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    prices = relationship(
        "CustomerProduct",
        back_populates="product",
        cascade="all, delete-orphan",
    )

    sale_items = relationship(
        "SaleProduct",
        back_populates="product",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("capital_per_kilo > 0", name="ck_capital_per_kilo_positive"),
    )
