"""
Financial aggregation tests (pure, transient model objects)
"""
from datetime import date, datetime

import pytest

from freshpos.models.order import Order, OrderItem, OrderStatus, OrderType, PaymentMethod
from freshpos.models.product import Product, ProductCategory, UnitType
from freshpos.services import reports
from freshpos.services.reports import DatePeriod
from freshpos.utils.helpers import subtract_months

TODAY = date(2025, 3, 31)


def make_order(id, created_at, items, status=OrderStatus.DELIVERED, customer_name="Cliente Mostrador"):
    order = Order(
        id=id, created_at=created_at, customer_name=customer_name,
        total=sum(i.subtotal for i in items), payment_method=PaymentMethod.CASH,
        order_type=OrderType.LOCAL, status=status,
    )
    order.items = items
    return order


def item(product_id, quantity, price, cost_at_sale=None, name="Item"):
    return OrderItem(
        product_id=product_id, product_name=name, quantity=quantity,
        price_at_sale=price, cost_at_sale=cost_at_sale, subtotal=quantity * price,
    )


@pytest.fixture()
def products():
    return {
        "chicken": Product(id="chicken", name="Pollo", category=ProductCategory.CHICKEN, unit=UnitType.KG,
                           price=8.5, cost=6.0, stock=10, min_stock=5),
        "eggs": Product(id="eggs", name="Huevos", category=ProductCategory.EGGS, unit=UnitType.UNIT,
                        price=0.18, cost=0.12, stock=100, min_stock=300),
    }


# ===================== TOTALS =====================


def test_summary_excludes_cancelled(products):
    orders = [
        make_order("a", datetime(2025, 3, 31, 9), [item("chicken", 2, 8.5, cost_at_sale=5.0)]),
        make_order("b", datetime(2025, 3, 31, 10), [item("chicken", 10, 8.5, cost_at_sale=5.0)],
                   status=OrderStatus.CANCELLED),
    ]
    summary = reports.financial_summary(orders, products, DatePeriod.TODAY, today=TODAY)
    assert summary.revenue == pytest.approx(17.0)
    assert summary.cost_of_goods_sold == pytest.approx(10.0)
    assert summary.net_profit == pytest.approx(7.0)
    assert summary.margin_percent == pytest.approx(7.0 / 17.0 * 100)
    assert summary.order_count == 1


def test_cost_fallbacks(products):
    orders = [make_order("a", datetime(2025, 3, 31, 9), [
        item("chicken", 1, 8.5, cost_at_sale=5.0),  # snapshot
        item("eggs", 30, 0.18),  # current cost 0.12
        item("gone", 2, 10.0, name="Queso Andino"),  # deleted product -> 0
    ])]
    summary = reports.financial_summary(orders, products)
    assert summary.cost_of_goods_sold == pytest.approx(5.0 + 30 * 0.12)
    assert [(g.operation, g.entity_id) for g in summary.gaps] == [("cost_lookup", "gone")]


def test_snapshot_survives_cost_change(products):
    orders = [make_order("a", datetime(2025, 3, 31, 9), [item("chicken", 1, 8.5, cost_at_sale=5.0)])]
    products["chicken"].cost = 7.5
    assert reports.financial_summary(orders, products).cost_of_goods_sold == pytest.approx(5.0)


def test_zero_revenue_margin(products):
    summary = reports.financial_summary([], products)
    assert summary.revenue == 0
    assert summary.margin_percent == 0
    assert summary.inventory_value == pytest.approx(10 * 6.0 + 100 * 0.12)


# ===================== PERIODS =====================


@pytest.mark.parametrize("period,moment,expected", [
    (DatePeriod.TODAY, datetime(2025, 3, 31, 23, 59), True),
    (DatePeriod.TODAY, datetime(2025, 3, 30, 12), False),
    (DatePeriod.YESTERDAY, datetime(2025, 3, 30, 12), True),
    (DatePeriod.WEEK, datetime(2025, 3, 24, 0, 1), True),
    (DatePeriod.WEEK, datetime(2025, 3, 23, 23), False),
    (DatePeriod.MONTH, datetime(2025, 2, 28, 8), True),
    (DatePeriod.MONTH, datetime(2025, 2, 27, 8), False),
    (DatePeriod.ALL, datetime(2001, 1, 1), True),
])
def test_in_period(period, moment, expected):
    assert reports.in_period(moment, period, today=TODAY) is expected


def test_custom_range_is_inclusive():
    start, end = date(2025, 3, 1), date(2025, 3, 10)
    assert reports.in_period(datetime(2025, 3, 1, 0, 0), DatePeriod.CUSTOM, start=start, end=end)
    assert reports.in_period(datetime(2025, 3, 10, 23, 59, 59), DatePeriod.CUSTOM, start=start, end=end)
    assert not reports.in_period(datetime(2025, 3, 11, 0, 0), DatePeriod.CUSTOM, start=start, end=end)
    assert reports.in_period(datetime(2020, 1, 1), DatePeriod.CUSTOM, start=start)


def test_subtract_months_clamps_day():
    assert subtract_months(date(2025, 3, 31)) == date(2025, 2, 28)
    assert subtract_months(date(2025, 1, 15)) == date(2024, 12, 15)


# ===================== SERIES AND BREAKDOWNS =====================


def test_daily_series(products):
    orders = [
        make_order("b", datetime(2025, 3, 5, 18), [item("chicken", 1, 8.5, cost_at_sale=6.0)]),
        make_order("a", datetime(2025, 3, 4, 9), [item("chicken", 2, 8.5, cost_at_sale=6.0)]),
        make_order("c", datetime(2025, 3, 5, 8), [item("eggs", 10, 0.2, cost_at_sale=0.1)]),
    ]
    series = reports.daily_series(orders, products)
    assert [b.label for b in series] == ["04 mar", "05 mar"]
    assert series[0].revenue == pytest.approx(17.0)
    assert series[0].profit == pytest.approx(5.0)
    assert series[1].revenue == pytest.approx(10.5)
    assert series[1].profit == pytest.approx(2.5 + 1.0)


def test_sales_by_category(products):
    orders = [
        make_order("a", datetime(2025, 3, 31), [item("chicken", 2, 8.5), item("eggs", 30, 0.18)]),
        make_order("b", datetime(2025, 3, 31), [item("gone", 1, 4.0)]),
        make_order("c", datetime(2025, 3, 31), [item("chicken", 5, 8.5)], status=OrderStatus.CANCELLED),
    ]
    totals = reports.sales_by_category(orders, products)
    assert totals == pytest.approx({"chicken": 17.0, "eggs": 5.4, "other": 4.0})


def test_sales_by_weekday(products):
    now = datetime(2025, 3, 31, 20)  # Monday
    orders = [
        make_order("a", datetime(2025, 3, 29, 10), [item("chicken", 1, 10.0)]),
        make_order("b", datetime(2025, 3, 31, 10), [item("chicken", 1, 5.0)]),
        make_order("c", datetime(2025, 3, 31, 11), [item("chicken", 1, 2.0)]),
        make_order("d", datetime(2025, 3, 20, 10), [item("chicken", 1, 99.0)]),
    ]
    assert reports.sales_by_weekday(orders, now=now) == [
        {"name": "sáb", "sales": 10.0},
        {"name": "lun", "sales": 7.0},
    ]


def test_low_stock_emptiest_first(products):
    products["chicken"].stock = 4
    alerts = reports.low_stock(products)
    assert [p.id for p in alerts] == ["eggs", "chicken"]


def test_sales_history_search_and_order():
    orders = [
        make_order("o-1", datetime(2025, 3, 31, 9), [item("x", 1, 1.0)], customer_name="Juan Perez"),
        make_order("o-2", datetime(2025, 3, 31, 12), [item("x", 1, 1.0)], customer_name="Maria Rodriguez"),
        make_order("o-3", datetime(2025, 3, 31, 15), [item("x", 1, 1.0)], customer_name="Juan Perez",
                   status=OrderStatus.CANCELLED),
        make_order("o-4", datetime(2025, 3, 30, 15), [item("x", 1, 1.0)], customer_name="Juan Perez"),
    ]
    assert [o.id for o in reports.sales_history(orders, today=TODAY)] == ["o-2", "o-1"]
    assert [o.id for o in reports.sales_history(orders, DatePeriod.ALL, today=TODAY, search="juan")] == ["o-1", "o-4"]
    assert [o.id for o in reports.sales_history(orders, DatePeriod.ALL, today=TODAY, search="O-2")] == ["o-2"]
