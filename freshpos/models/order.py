"""
Sales order models
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, Float, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from freshpos.database import Base
from freshpos.utils.helpers import new_id
from datetime import datetime
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    IN_PREPARATION = "in_preparation"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderType(str, Enum):
    LOCAL = "local"  # counter sale
    DELIVERY = "delivery"  # WhatsApp / phone order


class PaymentMethod(str, Enum):
    CASH = "cash"
    TRANSFER = "transfer"
    DIGITAL_WALLET = "digital_wallet"
    CARD = "card"


class Order(Base):
    """Completed sale. Never deleted; cancellation only changes status."""
    __tablename__ = "orders"

    id = Column(String, primary_key=True, default=new_id)
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)

    # Customer snapshot (customer may be edited or removed later)
    customer_id = Column(String, nullable=True, index=True)
    customer_name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    address = Column(Text, nullable=True)

    # Financial
    total = Column(Float, nullable=False)
    payment_method = Column(SQLEnum(PaymentMethod, native_enum=False), nullable=False, default=PaymentMethod.CASH)

    # Fulfilment
    order_type = Column(SQLEnum(OrderType, native_enum=False), nullable=False, index=True)
    status = Column(SQLEnum(OrderStatus, native_enum=False), nullable=False, index=True)
    assigned_to = Column(String, nullable=True)  # courier name

    # Relationships
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
        lazy="selectin",
    )


class OrderItem(Base):
    """Line of an order, frozen at sale time"""
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String, ForeignKey("orders.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    # No FK: products can be deleted while their orders stay
    product_id = Column(String, nullable=True, index=True)
    product_name = Column(String, nullable=False)  # includes sales unit, e.g. "Pechuga de Pollo (1 Lb)"

    quantity = Column(Float, nullable=False)  # base unit
    price_at_sale = Column(Float, nullable=False)  # per base unit
    cost_at_sale = Column(Float, nullable=True)  # per base unit; NULL on legacy records
    subtotal = Column(Float, nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")
