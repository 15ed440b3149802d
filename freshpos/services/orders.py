"""
Order lifecycle: creation from a cart, stock deduction, delivery status.

    pending -> in_preparation -> in_transit -> delivered
       \______________\________________\______-> cancelled

Counter sales are born delivered. Delivery orders are born pending and move
only when someone changes their status; nothing advances on a timer. The
status setter does not police transitions, it stores what it is given, and
next_statuses() tells the UI which buttons to offer.

Creating an order is the one event that takes stock out. Later status
changes never touch stock: a cancelled delivery already left the shop.
"""
import logging
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from freshpos.database import commit
from freshpos.exceptions import ValidationError
from freshpos.models.order import Order, OrderItem, OrderStatus, OrderType, PaymentMethod
from freshpos.services.cart import Cart, OrderItemDraft
from freshpos.services.catalog import load_product_index
from freshpos.services.customers import build_customer, get_customer
from freshpos.services.inventory import ReferenceGap, apply_sale
from freshpos.services.order_events import OrderEvent, order_events
from freshpos.utils.helpers import new_id
from freshpos.utils.validators import (
    validate_non_negative_amount,
    validate_positive_quantity,
    validate_required_text,
)

logger = logging.getLogger(__name__)

WALK_IN_CUSTOMER = "Cliente Mostrador"
DELIVERY_CUSTOMER = "Cliente WhatsApp"

NEXT_STATUSES = {
    OrderStatus.PENDING: [OrderStatus.IN_PREPARATION, OrderStatus.CANCELLED],
    OrderStatus.IN_PREPARATION: [OrderStatus.IN_TRANSIT, OrderStatus.CANCELLED],
    OrderStatus.IN_TRANSIT: [OrderStatus.DELIVERED, OrderStatus.CANCELLED],
    OrderStatus.DELIVERED: [],
    OrderStatus.CANCELLED: [],
}

TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


def initial_status(order_type: OrderType) -> OrderStatus:
    if OrderType(order_type) == OrderType.DELIVERY:
        return OrderStatus.PENDING
    return OrderStatus.DELIVERED


def next_statuses(status: OrderStatus) -> list[OrderStatus]:
    """Statuses the UI should offer from here (advisory, not enforced)"""
    return list(NEXT_STATUSES[OrderStatus(status)])


def is_terminal(status: OrderStatus) -> bool:
    return OrderStatus(status) in TERMINAL_STATUSES


def _validate_order_input(
    items: Sequence[OrderItemDraft],
    order_type: OrderType,
    phone: Optional[str],
    address: Optional[str],
) -> None:
    if not items:
        raise ValidationError("An order needs at least one item", field="items")
    for item in items:
        validate_positive_quantity(item.quantity)
        validate_non_negative_amount(item.price_at_sale, "price_at_sale")
    if order_type == OrderType.DELIVERY:
        validate_required_text(phone, "phone")
        validate_required_text(address, "address")


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------

async def create_order(
    db: AsyncSession,
    items: Sequence[OrderItemDraft],
    order_type: OrderType = OrderType.LOCAL,
    payment_method: PaymentMethod = PaymentMethod.CASH,
    customer_id: Optional[str] = None,
    customer_name: Optional[str] = None,
    phone: Optional[str] = None,
    address: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> tuple[Order, list[ReferenceGap]]:
    """
    Persist an order with its items and take the sold quantities out of stock.

    The order row, its items, the stock decrements and the customer's running
    total commit together or not at all.
    """
    order_type = OrderType(order_type)
    _validate_order_input(items, order_type, phone, address)

    order = Order(
        id=new_id(),
        created_at=created_at or datetime.now(),
        customer_id=customer_id,
        customer_name=customer_name or (DELIVERY_CUSTOMER if order_type == OrderType.DELIVERY else WALK_IN_CUSTOMER),
        phone=phone,
        address=address,
        total=sum(item.subtotal for item in items),
        payment_method=PaymentMethod(payment_method),
        order_type=order_type,
        status=initial_status(order_type),
    )
    order.items = [
        OrderItem(
            position=position,
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            price_at_sale=item.price_at_sale,
            cost_at_sale=item.cost_at_sale,
            subtotal=item.subtotal,
        )
        for position, item in enumerate(items)
    ]
    db.add(order)

    products = await load_product_index(db, [item.product_id for item in items])
    gaps = apply_sale(products, order.items)

    if customer_id:
        customer = await get_customer(db, customer_id)
        if customer:
            customer.total_purchases = (customer.total_purchases or 0.0) + order.total
        else:
            logger.warning(f"Order {order.id} references missing customer {customer_id}")
            gaps.append(ReferenceGap("sale", "customer", customer_id, order.customer_name))

    await commit(db)
    logger.info(
        f"Created {order.order_type.value} order {order.id}: "
        f"{len(order.items)} item(s), total={order.total:.2f}, status={order.status.value}"
    )

    order_events.publish(OrderEvent(
        order_id=order.id,
        order_type=order.order_type.value,
        status=order.status.value,
        created_at=order.created_at,
    ))
    return order, gaps


async def build_cart(db: AsyncSession, lines: Sequence[dict]) -> Cart:
    """
    Rebuild a cart from (product_id, quantity, unit) entries sent by the
    counter screen. Products must exist at sale time.
    """
    products = await load_product_index(db, [line["product_id"] for line in lines])
    cart = Cart()
    for line in lines:
        product = products.get(line["product_id"])
        if product is None:
            raise ValidationError(f"Product {line['product_id']} not found", field="product_id")
        cart.add_item(product, line["quantity"], line.get("unit"))
    return cart


async def checkout(
    db: AsyncSession,
    cart: Cart,
    order_type: OrderType = OrderType.LOCAL,
    payment_method: PaymentMethod = PaymentMethod.CASH,
    customer_id: Optional[str] = None,
    customer_name: Optional[str] = None,
    phone: Optional[str] = None,
    address: Optional[str] = None,
) -> tuple[Order, list[ReferenceGap]]:
    """
    Turn the cart into an order and empty it.

    A delivery taken for a new name (no customer picked) registers that
    person as a customer in the same transaction.
    """
    order_type = OrderType(order_type)
    items = cart.to_order_items()

    customer = await get_customer(db, customer_id) if customer_id else None
    if customer:
        phone = customer.phone or phone
        address = customer.address or address
    _validate_order_input(items, order_type, phone, address)

    if order_type == OrderType.DELIVERY:
        name = customer_name or (customer.name if customer else None) or DELIVERY_CUSTOMER
        if not customer and customer_name:
            customer = build_customer({"name": customer_name, "phone": phone, "address": address})
            db.add(customer)
            customer_id = customer.id
            logger.info(f"Registered new delivery customer {customer.id} ({customer.name})")
    else:
        name = customer.name if customer else (customer_name or WALK_IN_CUSTOMER)

    order, gaps = await create_order(
        db,
        items,
        order_type=order_type,
        payment_method=payment_method,
        customer_id=customer_id,
        customer_name=name,
        phone=phone,
        address=address,
    )
    cart.clear()
    return order, gaps


# ---------------------------------------------------------------------------
# Queries and status
# ---------------------------------------------------------------------------

async def get_order(db: AsyncSession, order_id: str) -> Optional[Order]:
    result = await db.execute(select(Order).where(Order.id == order_id))
    return result.scalar_one_or_none()


async def list_orders(
    db: AsyncSession,
    order_type: Optional[OrderType] = None,
    status: Optional[OrderStatus] = None,
    since: Optional[datetime] = None,
) -> list[Order]:
    """Orders newest first"""
    query = select(Order).order_by(Order.created_at.desc())
    if order_type:
        query = query.where(Order.order_type == order_type)
    if status:
        query = query.where(Order.status == status)
    if since:
        query = query.where(Order.created_at > since)

    result = await db.execute(query)
    return list(result.scalars().all())


async def set_order_status(
    db: AsyncSession,
    order_id: str,
    status: OrderStatus,
    assigned_to: Optional[str] = None,
) -> Optional[Order]:
    """
    Store a new status (and courier, when given). Unknown order ids are a
    no-op returning None. Stock is never touched here.
    """
    order = await get_order(db, order_id)
    if not order:
        logger.warning(f"Status change for missing order {order_id} ignored")
        return None

    previous = order.status
    order.status = OrderStatus(status)
    if assigned_to:
        order.assigned_to = assigned_to

    await commit(db)
    if order.status != previous and order.status not in NEXT_STATUSES[previous]:
        logger.info(f"Order {order_id} jumped {previous.value} -> {order.status.value}")
    else:
        logger.info(f"Order {order_id} status {previous.value} -> {order.status.value}")
    return order
