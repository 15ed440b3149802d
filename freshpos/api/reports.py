"""
Reports API endpoints - finance view and sales history
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from datetime import date
from pydantic import BaseModel

from freshpos.database import get_db
from freshpos.services import orders as order_service
from freshpos.services import reports
from freshpos.services.catalog import load_product_index
from freshpos.services.reports import DatePeriod
from freshpos.api.orders import OrderResponse, order_response

router = APIRouter()


class GapResponse(BaseModel):
    operation: str
    entity: str
    entity_id: Optional[str]
    detail: str = ""


class DayBucketResponse(BaseModel):
    day: date
    label: str
    revenue: float
    profit: float


class FinancialReportResponse(BaseModel):
    period: DatePeriod
    revenue: float
    cost_of_goods_sold: float
    net_profit: float
    margin_percent: float
    order_count: int
    inventory_value: float
    daily: List[DayBucketResponse]
    gaps: List[GapResponse] = []


@router.get("/financial", response_model=FinancialReportResponse)
async def financial_report(
    period: DatePeriod = DatePeriod.MONTH,
    start: Optional[date] = None,
    end: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
):
    """
    Revenue, cost of goods sold, net profit and margin over a period,
    plus the per-day revenue/profit series for the chart.
    """
    orders = await order_service.list_orders(db)
    products = await load_product_index(db)

    summary = reports.financial_summary(orders, products, period, start=start, end=end)
    daily = reports.daily_series(orders, products, period, start=start, end=end)

    return FinancialReportResponse(
        period=period,
        revenue=summary.revenue,
        cost_of_goods_sold=summary.cost_of_goods_sold,
        net_profit=summary.net_profit,
        margin_percent=summary.margin_percent,
        order_count=summary.order_count,
        inventory_value=summary.inventory_value,
        daily=[DayBucketResponse(day=b.day, label=b.label, revenue=b.revenue, profit=b.profit) for b in daily],
        gaps=[GapResponse(**gap.__dict__) for gap in summary.gaps],
    )


@router.get("/sales-history", response_model=List[OrderResponse])
async def sales_history(
    period: DatePeriod = DatePeriod.TODAY,
    start: Optional[date] = None,
    end: Optional[date] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """Valid sales in the period, newest first, searchable by customer or order id"""
    orders = await order_service.list_orders(db)
    history = reports.sales_history(orders, period, start=start, end=end, search=search)
    return [order_response(o) for o in history]
