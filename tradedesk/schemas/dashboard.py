# schemas/dashboard.py

from pydantic import BaseModel
from typing import List


class DashboardStats(BaseModel):
    customers: int
    products: int
    users: int
    total_sales: float


class MonthlySales(BaseModel):
    month: str
    sales: float


class CustomerShare(BaseModel):
    name: str
    value: float


class ProductSales(BaseModel):
    name: str
    sales: float


class DashboardResponse(BaseModel):
    stats: DashboardStats
    sales_data: List[MonthlySales]
    customers_data: List[CustomerShare]
    products_data: List[ProductSales]
