"""
Inventory ledger - the only place stock and cost move.

Sales take stock out, purchases put it back in and refresh the unit cost.
Both work on an indexed product repository (see catalog.index_products) and
mutate the product rows in place; the caller's session transaction decides
whether the whole batch commits or rolls back together.

A product deleted after the fact is skipped, never an error: the order or
purchase already carries its own snapshot. Each skip is returned as a
ReferenceGap so callers can log or alert on data drift.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from freshpos.models.product import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceGap:
    """An operation referenced an entity that no longer exists"""

    operation: str  # "sale", "purchase", "cost_lookup", ...
    entity: str  # "product", "order", "customer"
    entity_id: Optional[str]
    detail: str = ""


def apply_sale(products: Mapping[str, Product], items: Iterable) -> list[ReferenceGap]:
    """
    Decrement stock by each item's base-unit quantity.

    No clamping: overselling drives stock negative, which the low-stock alert
    picks up later.
    """
    gaps: list[ReferenceGap] = []
    for item in items:
        product = products.get(item.product_id)
        if product is None:
            gap = ReferenceGap("sale", "product", item.product_id, item.product_name)
            logger.warning(f"Sale references missing product {item.product_id} ({item.product_name}); stock not decremented")
            gaps.append(gap)
            continue
        product.stock = (product.stock or 0.0) - item.quantity
    return gaps


def apply_purchase(products: Mapping[str, Product], purchase) -> list[ReferenceGap]:
    """
    Increment stock by the purchased quantity and, when a cost was given,
    make it the product's current cost (last purchase wins).
    """
    product = products.get(purchase.product_id)
    if product is None:
        logger.warning(f"Purchase {purchase.id} references missing product {purchase.product_id}; stock unchanged")
        return [ReferenceGap("purchase", "product", purchase.product_id, purchase.product_name)]

    product.stock = (product.stock or 0.0) + purchase.quantity
    if purchase.unit_cost > 0:
        product.cost = purchase.unit_cost
    return []


def adjust_stock(product: Product, new_stock: float) -> float:
    """Manual correction after a physical count; returns the applied delta"""
    delta = new_stock - (product.stock or 0.0)
    product.stock = new_stock
    logger.info(f"Stock of {product.id} adjusted by {delta:+g} to {new_stock:g}")
    return delta
