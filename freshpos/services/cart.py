"""
Point-of-sale cart.

Each add produces its own line, even for a product already in the cart:
"1 Lb" and "0.5 Kg" of the same chicken cannot share one label, so lines are
never merged. Quantities on a line are always in the product's base unit.
"""
from dataclasses import dataclass
from typing import Iterator, Optional

from freshpos.exceptions import ValidationError
from freshpos.models.product import ProductCategory, UnitType
from freshpos.services.units import convert, from_base_quantity


@dataclass(frozen=True)
class CartLineItem:
    product_id: str
    product_name: str
    category: ProductCategory
    base_unit: UnitType
    price: float  # per base unit, at the time of adding
    cost: float  # per base unit, at the time of adding
    quantity: float  # base unit
    entered_quantity: float
    entered_unit: UnitType
    sales_unit: str  # derived label, e.g. "1.5 Lb", "Docena"

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity

    @property
    def sales_quantity(self) -> float:
        """Quantity back in the unit the cashier typed it in"""
        return from_base_quantity(self.quantity, self.entered_unit, self.base_unit)


@dataclass(frozen=True)
class OrderItemDraft:
    """Frozen line handed to order creation"""

    product_id: str
    product_name: str
    quantity: float
    price_at_sale: float
    cost_at_sale: Optional[float]

    @property
    def subtotal(self) -> float:
        return self.quantity * self.price_at_sale


class Cart:
    """In-progress sale; owns its lines until checkout or clear()"""

    def __init__(self):
        self._lines: list[CartLineItem] = []

    def add_item(self, product, entered_quantity: float, entered_unit=None) -> CartLineItem:
        conversion = convert(product, entered_quantity, entered_unit)
        line = CartLineItem(
            product_id=product.id,
            product_name=product.name,
            category=ProductCategory(product.category),
            base_unit=UnitType(product.unit),
            price=conversion.effective_unit_price,
            cost=product.cost or 0.0,
            quantity=conversion.base_quantity,
            entered_quantity=entered_quantity,
            entered_unit=UnitType(entered_unit) if entered_unit is not None else UnitType(product.unit),
            sales_unit=conversion.display_label,
        )
        self._lines.append(line)
        return line

    def remove_item(self, line_index: int) -> CartLineItem:
        if not 0 <= line_index < len(self._lines):
            raise ValidationError(f"No cart line at position {line_index}", field="line_index")
        return self._lines.pop(line_index)

    def total(self) -> float:
        return sum(line.price * line.quantity for line in self._lines)

    def clear(self) -> None:
        self._lines.clear()

    @property
    def lines(self) -> list[CartLineItem]:
        return list(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLineItem]:
        return iter(list(self._lines))

    def to_order_items(self) -> list[OrderItemDraft]:
        return [
            OrderItemDraft(
                product_id=line.product_id,
                product_name=f"{line.product_name} ({line.sales_unit})",
                quantity=line.quantity,
                price_at_sale=line.price,
                cost_at_sale=line.cost,
            )
            for line in self._lines
        ]
