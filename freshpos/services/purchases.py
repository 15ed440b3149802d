"""
Purchases (restock entries) - append-only ledger of goods received
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from freshpos.database import commit
from freshpos.models.purchase import Purchase
from freshpos.services.catalog import load_product_index
from freshpos.services.inventory import ReferenceGap, apply_purchase
from freshpos.utils.helpers import new_id
from freshpos.utils.validators import (
    validate_non_negative_amount,
    validate_positive_quantity,
    validate_required_text,
)

logger = logging.getLogger(__name__)


async def list_purchases(db: AsyncSession, product_id: Optional[str] = None) -> list[Purchase]:
    """Purchases newest first"""
    query = select(Purchase).order_by(Purchase.created_at.desc())
    if product_id:
        query = query.where(Purchase.product_id == product_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def register_purchase(
    db: AsyncSession,
    product_id: str,
    quantity: float,
    unit_cost: float,
    supplier: Optional[str] = None,
    notes: Optional[str] = None,
    product_name: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> tuple[Purchase, list[ReferenceGap]]:
    """
    Record goods received and put them into stock.

    The purchase row and the stock/cost update commit together.
    """
    product_id = validate_required_text(product_id, "product_id")
    validate_positive_quantity(quantity)
    validate_non_negative_amount(unit_cost, "unit_cost")

    products = await load_product_index(db, [product_id])
    product = products.get(product_id)

    purchase = Purchase(
        id=new_id(),
        created_at=created_at or datetime.now(),
        product_id=product_id,
        product_name=product.name if product else (product_name or ""),
        quantity=quantity,
        unit_cost=unit_cost,
        total_cost=quantity * unit_cost,
        supplier=supplier,
        notes=notes,
    )
    db.add(purchase)
    gaps = apply_purchase(products, purchase)

    await commit(db)
    logger.info(
        f"Registered purchase {purchase.id}: {quantity:g} of {purchase.product_name} "
        f"at {unit_cost:.2f} from {supplier or 'unknown supplier'}"
    )
    return purchase, gaps
