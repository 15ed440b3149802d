"""
Financial reporting over order history.

All figures skip cancelled orders. Cost of goods sold uses the cost frozen on
each order item at sale time, so margins stay right after suppliers change
prices. Old items without that snapshot fall back to the product's current
cost, and to zero when the product is gone (reported as a ReferenceGap).

Everything here is pure: callers load orders and the product index and pass
them in.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Mapping, Optional

from freshpos.models.order import OrderStatus
from freshpos.models.product import Product, ProductCategory
from freshpos.services.inventory import ReferenceGap
from freshpos.utils.helpers import day_label, end_of_day, start_of_day, subtract_months, weekday_label

logger = logging.getLogger(__name__)


class DatePeriod(str, Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    WEEK = "week"  # trailing 7 days
    MONTH = "month"  # since the same day last month
    CUSTOM = "custom"  # inclusive start..end
    ALL = "all"


@dataclass
class FinancialSummary:
    revenue: float
    cost_of_goods_sold: float
    net_profit: float
    margin_percent: float
    order_count: int
    inventory_value: float
    gaps: list[ReferenceGap] = field(default_factory=list)


@dataclass
class DayBucket:
    day: date
    label: str
    revenue: float = 0.0
    profit: float = 0.0


# ---------------------------------------------------------------------------
# Date filtering
# ---------------------------------------------------------------------------

def in_period(
    moment: datetime,
    period: DatePeriod,
    today: Optional[date] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> bool:
    """Whether a timestamp falls in the reporting window"""
    period = DatePeriod(period)
    today = today or date.today()
    day = moment.date()

    if period == DatePeriod.TODAY:
        return day == today
    if period == DatePeriod.YESTERDAY:
        return day == today - timedelta(days=1)
    if period == DatePeriod.WEEK:
        return day >= today - timedelta(days=7)
    if period == DatePeriod.MONTH:
        return day >= subtract_months(today, 1)
    if period == DatePeriod.CUSTOM:
        if not start or not end:
            return True
        return start_of_day(start) <= moment <= end_of_day(end)
    return True


def is_cancelled(order) -> bool:
    return order.status == OrderStatus.CANCELLED


def filter_orders(
    orders: Iterable,
    period: DatePeriod = DatePeriod.ALL,
    today: Optional[date] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    include_cancelled: bool = False,
) -> list:
    return [
        o for o in orders
        if (include_cancelled or not is_cancelled(o))
        and in_period(o.created_at, period, today, start, end)
    ]


# ---------------------------------------------------------------------------
# Cost and totals
# ---------------------------------------------------------------------------

def item_unit_cost(item, products: Mapping[str, Product]) -> tuple[float, Optional[ReferenceGap]]:
    """Cost per base unit for a sold item: snapshot, else current, else 0"""
    if item.cost_at_sale is not None:
        return item.cost_at_sale, None
    product = products.get(item.product_id)
    if product is not None:
        return product.cost or 0.0, None
    return 0.0, ReferenceGap("cost_lookup", "product", item.product_id, item.product_name)


def order_cost(order, products: Mapping[str, Product], gaps: Optional[dict] = None) -> float:
    total = 0.0
    for item in order.items:
        unit_cost, gap = item_unit_cost(item, products)
        if gap is not None and gaps is not None:
            gaps.setdefault(gap.entity_id, gap)
        total += item.quantity * unit_cost
    return total


def inventory_valuation(products: Mapping[str, Product]) -> float:
    """Stock on hand at current cost; a point-in-time figure"""
    return sum((p.stock or 0.0) * (p.cost or 0.0) for p in products.values())


def financial_summary(
    orders: Iterable,
    products: Mapping[str, Product],
    period: DatePeriod = DatePeriod.ALL,
    today: Optional[date] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> FinancialSummary:
    selected = filter_orders(orders, period, today, start, end)
    gaps: dict = {}

    revenue = sum(o.total for o in selected)
    cogs = sum(order_cost(o, products, gaps) for o in selected)
    profit = revenue - cogs
    margin = (profit / revenue * 100) if revenue else 0.0

    if gaps:
        logger.warning(f"{len(gaps)} sold product(s) no longer exist; their cost counted as 0")

    return FinancialSummary(
        revenue=revenue,
        cost_of_goods_sold=cogs,
        net_profit=profit,
        margin_percent=margin,
        order_count=len(selected),
        inventory_value=inventory_valuation(products),
        gaps=list(gaps.values()),
    )


def daily_series(
    orders: Iterable,
    products: Mapping[str, Product],
    period: DatePeriod = DatePeriod.ALL,
    today: Optional[date] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[DayBucket]:
    """Revenue and profit per calendar day, oldest first"""
    buckets: dict[date, DayBucket] = {}
    for order in filter_orders(orders, period, today, start, end):
        day = order.created_at.date()
        bucket = buckets.get(day)
        if bucket is None:
            bucket = buckets[day] = DayBucket(day=day, label=day_label(day))
        bucket.revenue += order.total
        bucket.profit += order.total - order_cost(order, products)
    return [buckets[day] for day in sorted(buckets)]


# ---------------------------------------------------------------------------
# Dashboard and history
# ---------------------------------------------------------------------------

def sales_by_category(orders: Iterable, products: Mapping[str, Product]) -> dict[str, float]:
    """Item subtotals per product category; deleted products count as 'other'"""
    totals: dict[str, float] = {}
    for order in orders:
        if is_cancelled(order):
            continue
        for item in order.items:
            product = products.get(item.product_id)
            category = ProductCategory(product.category) if product else ProductCategory.OTHER
            totals[category.value] = totals.get(category.value, 0.0) + item.subtotal
    return totals


def sales_by_weekday(orders: Iterable, now: Optional[datetime] = None) -> list[dict]:
    """Order totals of the last 7 days per weekday, oldest day first"""
    now = now or datetime.now()
    cutoff = now - timedelta(days=7)
    totals: dict[str, float] = {}
    for order in sorted(orders, key=lambda o: o.created_at):
        if is_cancelled(order) or order.created_at <= cutoff:
            continue
        label = weekday_label(order.created_at.date())
        totals[label] = totals.get(label, 0.0) + order.total
    return [{"name": label, "sales": total} for label, total in totals.items()]


def low_stock(products: Mapping[str, Product]) -> list[Product]:
    """Products at or under their minimum, emptiest first"""
    return sorted(
        (p for p in products.values() if p.is_low_stock),
        key=lambda p: (p.stock or 0.0) - (p.min_stock or 0.0),
    )


def sales_history(
    orders: Iterable,
    period: DatePeriod = DatePeriod.TODAY,
    today: Optional[date] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    search: Optional[str] = None,
) -> list:
    """Valid sales in the window, optionally matching customer name or order id"""
    result = filter_orders(orders, period, today, start, end)
    if search:
        needle = search.strip().lower()
        result = [
            o for o in result
            if needle in (o.customer_name or "").lower() or needle in o.id.lower()
        ]
    return sorted(result, key=lambda o: o.created_at, reverse=True)
