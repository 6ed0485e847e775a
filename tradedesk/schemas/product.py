# schemas/product.py

from decimal import Decimal
from pydantic import BaseModel, Field
from datetime import datetime


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)

    capital_per_kilo: Decimal = Field(
        ...,
        gt=0,
        lt=100_000_000,
        description="Cost basis per kilo, must be positive",
    )


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=120)
    capital_per_kilo: Decimal | None = Field(None, gt=0, lt=100_000_000)


class ProductResponse(BaseModel):
    id: int
    name: str
    capital_per_kilo: float
    created_at: datetime

    class Config:
        from_attributes = True
