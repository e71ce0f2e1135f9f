"""
Schemas del dashboard financiero.
"""

from decimal import Decimal

from pydantic import BaseModel


class DashboardSummary(BaseModel):
    total_demandas: int
    by_status: dict[str, int]
    total_proposed_value: Decimal
    open_value: Decimal
    fulfilled_value: Decimal


class MonthlyPerformance(BaseModel):
    month: str
    count: int
    proposed_value: Decimal


class CategoryCount(BaseModel):
    category: str
    count: int


class DashboardResponse(BaseModel):
    summary: DashboardSummary
    monthly_performance: list[MonthlyPerformance]
    demand_types: list[CategoryCount]
