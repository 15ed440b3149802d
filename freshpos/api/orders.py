"""
Orders API endpoints - delivery board and order status
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel

from freshpos.config import get_settings
from freshpos.database import get_db
from freshpos.models.order import OrderStatus, OrderType, PaymentMethod
from freshpos.services import orders as order_service
from freshpos.services.order_events import order_events

router = APIRouter()


class OrderItemResponse(BaseModel):
    product_id: Optional[str]
    product_name: str
    quantity: float
    price_at_sale: float
    cost_at_sale: Optional[float]
    subtotal: float

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: str
    created_at: datetime
    customer_id: Optional[str]
    customer_name: str
    phone: Optional[str]
    address: Optional[str]
    items: List[OrderItemResponse]
    total: float
    status: OrderStatus
    order_type: OrderType
    payment_method: PaymentMethod
    assigned_to: Optional[str]
    next_statuses: List[OrderStatus] = []

    class Config:
        from_attributes = True


class OrderFeedResponse(BaseModel):
    orders: List[OrderResponse]
    next_since: Optional[datetime]
    server_time: datetime
    poll_interval_seconds: int


class StatusUpdate(BaseModel):
    status: OrderStatus
    assigned_to: Optional[str] = None


def order_response(order) -> OrderResponse:
    response = OrderResponse.model_validate(order)
    response.next_statuses = order_service.next_statuses(order.status)
    return response


@router.get("/", response_model=List[OrderResponse])
async def list_orders(
    order_type: Optional[OrderType] = None,
    status: Optional[OrderStatus] = None,
    since: Optional[datetime] = None,
    db: AsyncSession = Depends(get_db),
):
    """List orders newest first, optionally by type, status and creation time"""
    orders = await order_service.list_orders(db, order_type=order_type, status=status, since=since)
    return [order_response(o) for o in orders]


@router.get("/feed", response_model=OrderFeedResponse)
async def order_feed(
    since: Optional[datetime] = None,
    order_type: Optional[OrderType] = OrderType.DELIVERY,
    db: AsyncSession = Depends(get_db),
):
    """
    Polling endpoint for the delivery board: orders created after `since`.
    Clients pass back `next_since` (the newest `created_at` seen so far)
    as the next `since`; `server_time` is informational only.
    """
    orders = await order_service.list_orders(db, order_type=order_type, since=since)
    next_since = max((o.created_at for o in orders), default=since)
    return OrderFeedResponse(
        orders=[order_response(o) for o in orders],
        next_since=next_since,
        server_time=datetime.now(),
        poll_interval_seconds=get_settings().ORDER_POLL_INTERVAL_SEC,
    )


@router.get("/wait")
async def wait_for_order(
    timeout: Optional[float] = Query(None, gt=0),
):
    """
    Hold the request until a new order is created (or the timeout passes).
    Returns the new order's id, type and status, or `{"event": null}`.
    """
    settings = get_settings()
    wait_seconds = min(timeout or settings.ORDER_WAIT_TIMEOUT_SEC, settings.ORDER_WAIT_TIMEOUT_SEC)
    event = await order_events.wait_for_event(wait_seconds)
    if event is None:
        return {"event": None}
    return {
        "event": {
            "order_id": event.order_id,
            "order_type": event.order_type,
            "status": event.status,
            "created_at": event.created_at.isoformat(),
        }
    }


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, db: AsyncSession = Depends(get_db)):
    order = await order_service.get_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order_response(order)


@router.put("/{order_id}/status", response_model=OrderResponse)
async def update_status(order_id: str, data: StatusUpdate, db: AsyncSession = Depends(get_db)):
    """Move an order to a new status, optionally assigning a courier"""
    order = await order_service.set_order_status(db, order_id, data.status, data.assigned_to)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order_response(order)
