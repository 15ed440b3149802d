from freshpos.models.product import Product, ProductCategory, UnitType
from freshpos.models.order import Order, OrderItem, OrderStatus, OrderType, PaymentMethod
from freshpos.models.purchase import Purchase
from freshpos.models.customer import Customer

__all__ = [
    "Product",
    "ProductCategory",
    "UnitType",
    "Order",
    "OrderItem",
    "OrderStatus",
    "OrderType",
    "PaymentMethod",
    "Purchase",
    "Customer",
]
