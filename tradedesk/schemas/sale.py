# schemas/sale.py

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List
from decimal import Decimal

from tradedesk.schemas.customer import CustomerResponse
from tradedesk.schemas.product import ProductResponse


class SaleItemCreate(BaseModel):
    product_id: int
    quantity: Decimal = Field(..., gt=0, lt=1_000_000, decimal_places=2, description="Kilos sold")
    price: Decimal = Field(..., gt=0, lt=100_000_000, decimal_places=2, description="Price per kilo")


class SaleCreate(BaseModel):
    customer_id: int
    items: List[SaleItemCreate]
    total: Decimal | None = None
    created_at: datetime | None = None


class SaleUpdate(BaseModel):
    customer_id: int | None = None
    items: List[SaleItemCreate] | None = None
    total: Decimal | None = None
    created_at: datetime | None = None


class SaleItemResponse(BaseModel):
    id: int
    product_id: int
    quantity: float
    price: float
    product: ProductResponse

    class Config:
        from_attributes = True


class SaleResponse(BaseModel):
    id: int
    customer_id: int
    total: float
    created_at: datetime
    customer: CustomerResponse
    items: List[SaleItemResponse]

    class Config:
        from_attributes = True
