# tradedesk/models/sales.py

from sqlalchemy import Column, Index, Integer, DateTime, ForeignKey, Numeric
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from tradedesk.database import Base


class Sale(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)

    customer_id = Column(
        Integer,
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    total = Column(Numeric(12, 2), nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    customer = relationship("Customer", back_populates="sales")

    items = relationship(
        "SaleProduct",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleProduct.id",
    )

    __table_args__ = (
        Index("ix_sales_customer_created", "customer_id", "created_at"),
    )
