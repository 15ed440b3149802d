"""
Input validation utilities
"""
import math
from typing import Optional

from freshpos.exceptions import ValidationError


def validate_required_text(value: Optional[str], field: str) -> str:
    """Reject missing or blank text"""
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required", field=field)
    return value.strip()


def validate_positive_quantity(quantity: float, field: str = "quantity") -> float:
    """Quantities entered at the counter must be finite and > 0"""
    if quantity is None or not math.isfinite(quantity) or quantity <= 0:
        raise ValidationError(f"{field} must be greater than zero", field=field)
    return quantity


def validate_non_negative_amount(amount: float, field: str) -> float:
    """Prices, costs and thresholds may be zero but not negative"""
    if amount is None or not math.isfinite(amount) or amount < 0:
        raise ValidationError(f"{field} must be zero or positive", field=field)
    return amount
