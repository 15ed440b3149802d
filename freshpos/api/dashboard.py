"""
Dashboard API - aggregated data for the owner's home screen
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from freshpos.config import get_settings
from freshpos.database import get_db
from freshpos.models.order import OrderType
from freshpos.services import orders as order_service
from freshpos.services import reports
from freshpos.services.catalog import list_products, index_products

router = APIRouter()


@router.get("/")
async def get_dashboard(db: AsyncSession = Depends(get_db)):
    """
    Everything the dashboard shows in one call: sales totals, the weekly
    chart, sales per category, low stock alerts and inventory value.
    """
    settings = get_settings()
    orders = await order_service.list_orders(db)
    products = index_products(await list_products(db))

    valid_orders = reports.filter_orders(orders)
    pending_deliveries = [
        o for o in orders
        if o.order_type == OrderType.DELIVERY and not order_service.is_terminal(o.status)
    ]
    alerts = reports.low_stock(products)

    return {
        "total_sales": sum(o.total for o in valid_orders),
        "order_count": len(valid_orders),
        "pending_deliveries": len(pending_deliveries),
        "inventory_value": reports.inventory_valuation(products),
        "weekly_sales": reports.sales_by_weekday(orders),
        "sales_by_category": [
            {"name": category, "value": total}
            for category, total in reports.sales_by_category(orders, products).items()
        ],
        "low_stock": [
            {
                "id": p.id,
                "name": p.name,
                "stock": p.stock,
                "min_stock": p.min_stock,
                "unit": p.unit,
            }
            for p in alerts[:settings.LOW_STOCK_ALERT_LIMIT]
        ],
        "low_stock_count": len(alerts),
        "currency": settings.CURRENCY_SYMBOL,
    }
