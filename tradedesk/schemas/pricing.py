# schemas/pricing.py

from pydantic import BaseModel
from typing import List


class CustomerProductPrice(BaseModel):
    id: int
    name: str
    capital_per_kilo: float
    price_per_kilo: float
    has_custom_price: bool
    total_purchased: float


class CustomerProductResponse(BaseModel):
    id: int
    customer_id: int
    product_id: int
    price_per_kilo: float

    class Config:
        from_attributes = True


class PriceUpdateResponse(BaseModel):
    message: str
    updates: List[CustomerProductResponse]
