"""
Unit conversion between what the cashier enters and what the stock is kept in.

Stock and catalog prices are denominated in the product's base unit (kg for
meat, chicken and cheese; single units for eggs). At the counter the cashier
may enter pounds for a kg product, or a dozen/cubeta of eggs. Everything here
is pure: no session, no I/O, no rounding. Round only when displaying.

Weight family: kg <-> lb through one constant, KG_PER_LB, used in both
directions so that quantities and prices never drift apart.

Count family: eggs are counted one by one. 12 / 15 / 30 are only labels
(Docena / Quincena / Cubeta); the base quantity is exactly what was entered.
"""
import math
from dataclasses import dataclass
from typing import Optional, Union

from freshpos.exceptions import ValidationError
from freshpos.models.product import ProductCategory, UnitType
from freshpos.utils.helpers import format_quantity
from freshpos.utils.validators import validate_positive_quantity

KG_PER_LB = 0.453592

# kilograms per one unit, for every unit of the weight family
WEIGHT_FACTORS = {
    UnitType.KG: 1.0,
    UnitType.POUND: KG_PER_LB,
}

COUNT_UNITS = {UnitType.UNIT}

UNIT_LABELS = {
    UnitType.UNIT: "Und",
    UnitType.KG: "Kg",
    UnitType.POUND: "Lb",
    UnitType.TRAY: "Bandeja",
    UnitType.LITER: "Litro",
}

EGG_PACK_LABELS = {
    1: "Unidad",
    12: "Docena",
    15: "Quincena",
    30: "Cubeta",
}


@dataclass(frozen=True)
class Conversion:
    """Result of converting one counter entry into base-unit terms"""

    base_quantity: float
    display_label: str
    effective_unit_price: float  # per base unit
    sales_unit_price: float  # per entered unit

    @property
    def amount(self) -> float:
        return self.base_quantity * self.effective_unit_price


def as_unit(value: Union[str, UnitType]) -> UnitType:
    """Coerce a unit code ('kg', 'lb', ...) to UnitType"""
    try:
        return UnitType(value)
    except ValueError:
        valid = ", ".join(u.value for u in UnitType)
        raise ValidationError(f"Unknown unit '{value}'. Must be one of: {valid}", field="unit")


def unit_family(unit: UnitType) -> str:
    if unit in WEIGHT_FACTORS:
        return "weight"
    if unit in COUNT_UNITS:
        return "count"
    return unit.value


def sales_units_for(base_unit: Union[str, UnitType]) -> list[UnitType]:
    """Units a cashier may sell a product in, given its base unit"""
    base = as_unit(base_unit)
    if unit_family(base) == "weight":
        return list(WEIGHT_FACTORS)
    return [base]


def scale_factor(entered_unit: Union[str, UnitType], base_unit: Union[str, UnitType]) -> float:
    """How many base units one entered unit is worth"""
    entered = as_unit(entered_unit)
    base = as_unit(base_unit)
    if entered == base:
        return 1.0
    if unit_family(entered) == "weight" and unit_family(base) == "weight":
        return WEIGHT_FACTORS[entered] / WEIGHT_FACTORS[base]
    raise ValidationError(
        f"Cannot sell in {UNIT_LABELS[entered]} a product stocked in {UNIT_LABELS[base]}",
        field="unit",
    )


def to_base_quantity(quantity: float, entered_unit, base_unit) -> float:
    return quantity * scale_factor(entered_unit, base_unit)


def from_base_quantity(base_quantity: float, entered_unit, base_unit) -> float:
    return base_quantity / scale_factor(entered_unit, base_unit)


def price_per_sales_unit(base_price: float, entered_unit, base_unit) -> float:
    """Price of one entered unit, e.g. price per lb of a product priced per kg"""
    return base_price * scale_factor(entered_unit, base_unit)


def display_label(category, quantity: float, entered_unit) -> str:
    """Human label for the cart line and the frozen order item name"""
    unit = as_unit(entered_unit)
    if unit in COUNT_UNITS and ProductCategory(category) == ProductCategory.EGGS:
        if quantity in EGG_PACK_LABELS:
            return EGG_PACK_LABELS[int(quantity)]
    return f"{format_quantity(quantity)} {UNIT_LABELS[unit]}"


def convert(product, entered_quantity: float, entered_unit: Optional[Union[str, UnitType]] = None) -> Conversion:
    """
    Translate a counter entry into base-unit quantity and price.

    Raises ValidationError for non-positive quantities, fractional counts,
    or a unit from another family than the product's base unit.
    """
    validate_positive_quantity(entered_quantity)
    base_unit = as_unit(product.unit)
    unit = as_unit(entered_unit) if entered_unit is not None else base_unit

    factor = scale_factor(unit, base_unit)
    if unit in COUNT_UNITS and not float(entered_quantity).is_integer():
        raise ValidationError("Counted items must be sold in whole units", field="quantity")

    base_quantity = entered_quantity * factor
    if not math.isfinite(base_quantity) or base_quantity <= 0:
        raise ValidationError("quantity must be greater than zero", field="quantity")

    price = product.price or 0.0
    return Conversion(
        base_quantity=base_quantity,
        display_label=display_label(product.category, entered_quantity, unit),
        effective_unit_price=price,
        sales_unit_price=price * factor,
    )


def default_sales_entry(product) -> tuple[float, UnitType]:
    """Quantity and unit pre-filled when a product is picked at the counter"""
    base_unit = as_unit(product.unit)
    if ProductCategory(product.category) == ProductCategory.EGGS and base_unit in COUNT_UNITS:
        return 12, base_unit
    return 1, base_unit
