# schemas/analytics.py

from pydantic import BaseModel
from datetime import date
from decimal import Decimal
from typing import List, Optional


class SalesSummary(BaseModel):
    gross_sales: Decimal
    net_sales: Decimal
    profit_percentage: Decimal


class MonthBucket(BaseModel):
    key: str
    month: str
    total: Decimal


class PeriodTotals(BaseModel):
    start_date: date
    end_date: date
    gross_sales: Decimal
    net_sales: Decimal
    profit_percentage: Decimal


class MonthComparison(BaseModel):
    current: PeriodTotals
    previous: PeriodTotals
    gross_change: Decimal
    gross_change_percentage: Decimal
    net_change: Decimal
    net_change_percentage: Decimal


class SaleHighlight(BaseModel):
    sale_id: Optional[int]
    total: Decimal
    customer_name: str


class BusinessSummary(BaseModel):
    total_sales: int
    average_sales_per_day: Decimal
    average_sale_value: Decimal
    min_sale_value: Decimal
    max_sale_value: Decimal
    average_profit_per_sale: Decimal
    min_profit_per_sale: Decimal
    max_profit_per_sale: Decimal
    highest_sale: Optional[SaleHighlight]
    lowest_sale: Optional[SaleHighlight]


class RankedEntry(BaseModel):
    id: Optional[int]
    name: str
    gross_sales: Decimal
    net_sales: Decimal
    quantity: Decimal


class AnalyticsResponse(BaseModel):
    scope: str
    summary: SalesSummary
    monthly_gross: List[MonthBucket]
    monthly_net: List[MonthBucket]
    comparison: MonthComparison
    business_summary: BusinessSummary
    top_customers: List[RankedEntry]
    top_products: List[RankedEntry]
