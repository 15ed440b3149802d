"""
Point-of-sale API endpoints - unit conversion preview, cart quote, checkout
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from pydantic import BaseModel, Field

from freshpos.database import get_db
from freshpos.exceptions import ValidationError
from freshpos.models.order import OrderType, PaymentMethod
from freshpos.models.product import UnitType
from freshpos.services import catalog
from freshpos.services import orders as order_service
from freshpos.services.units import convert
from freshpos.api.orders import OrderResponse, order_response

router = APIRouter()


class CartLineRequest(BaseModel):
    product_id: str
    quantity: float
    unit: Optional[UnitType] = None  # defaults to the product's base unit


class ConversionResponse(BaseModel):
    product_id: str
    base_quantity: float
    base_unit: UnitType
    display_label: str
    effective_unit_price: float
    sales_unit_price: float
    amount: float


class CartLineResponse(BaseModel):
    product_id: str
    product_name: str
    sales_unit: str
    quantity: float
    base_unit: UnitType
    price: float
    subtotal: float


class QuoteRequest(BaseModel):
    lines: List[CartLineRequest]


class QuoteResponse(BaseModel):
    lines: List[CartLineResponse]
    total: float


class CheckoutRequest(BaseModel):
    lines: List[CartLineRequest] = Field(..., min_length=1)
    order_type: OrderType = OrderType.LOCAL
    payment_method: PaymentMethod = PaymentMethod.CASH
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class CheckoutResponse(BaseModel):
    order: OrderResponse
    warnings: List[str] = []


@router.post("/convert", response_model=ConversionResponse)
async def convert_entry(data: CartLineRequest, db: AsyncSession = Depends(get_db)):
    """Preview what a counter entry deducts from stock and costs"""
    product = await catalog.get_product(db, data.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    try:
        conversion = convert(product, data.quantity, data.unit)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return ConversionResponse(
        product_id=product.id,
        base_quantity=conversion.base_quantity,
        base_unit=product.unit,
        display_label=conversion.display_label,
        effective_unit_price=conversion.effective_unit_price,
        sales_unit_price=conversion.sales_unit_price,
        amount=conversion.amount,
    )


@router.post("/quote", response_model=QuoteResponse)
async def quote_cart(data: QuoteRequest, db: AsyncSession = Depends(get_db)):
    """Price a cart without selling it"""
    try:
        cart = await order_service.build_cart(db, [line.model_dump() for line in data.lines])
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return QuoteResponse(
        lines=[
            CartLineResponse(
                product_id=line.product_id,
                product_name=line.product_name,
                sales_unit=line.sales_unit,
                quantity=line.quantity,
                base_unit=line.base_unit,
                price=line.price,
                subtotal=line.subtotal,
            )
            for line in cart
        ],
        total=cart.total(),
    )


@router.post("/checkout", response_model=CheckoutResponse)
async def checkout(data: CheckoutRequest, db: AsyncSession = Depends(get_db)):
    """Sell the cart: create the order and take the items out of stock"""
    try:
        cart = await order_service.build_cart(db, [line.model_dump() for line in data.lines])
        order, gaps = await order_service.checkout(
            db,
            cart,
            order_type=data.order_type,
            payment_method=data.payment_method,
            customer_id=data.customer_id,
            customer_name=data.customer_name,
            phone=data.phone,
            address=data.address,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return CheckoutResponse(
        order=order_response(order),
        warnings=[f"{gap.entity} {gap.entity_id} not found ({gap.operation})" for gap in gaps],
    )
