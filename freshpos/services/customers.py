"""
Customer records
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from freshpos.config import get_settings
from freshpos.database import commit
from freshpos.models.customer import Customer
from freshpos.utils.helpers import new_id
from freshpos.utils.validators import validate_required_text

logger = logging.getLogger(__name__)

DEFAULT_CUSTOMERS = [
    ("Juan Perez", "999888777", "Av. Principal 123", True, 1500.0),
    ("Maria Rodriguez", "999111222", "Jr. Los Andes 456", False, 50.0),
]


async def list_customers(db: AsyncSession, search: Optional[str] = None) -> list[Customer]:
    """All customers by name; seeds the demo customers when the table is empty"""
    result = await db.execute(select(Customer).order_by(Customer.name))
    customers = list(result.scalars().all())

    if not customers and get_settings().SEED_DEFAULT_DATA:
        for name, phone, address, is_frequent, total in DEFAULT_CUSTOMERS:
            customers.append(Customer(
                id=new_id(), name=name, phone=phone, address=address,
                is_frequent=is_frequent, total_purchases=total,
            ))
        db.add_all(customers)
        await commit(db)
        logger.info(f"Seeded {len(customers)} customers")

    if search:
        needle = search.strip().lower()
        customers = [
            c for c in customers
            if needle in c.name.lower() or (c.phone and needle in c.phone)
        ]
    return customers


async def get_customer(db: AsyncSession, customer_id: str) -> Optional[Customer]:
    result = await db.execute(select(Customer).where(Customer.id == customer_id))
    return result.scalar_one_or_none()


def build_customer(data: dict) -> Customer:
    return Customer(
        id=data.get("id") or new_id(),
        name=validate_required_text(data.get("name"), "name"),
        phone=data.get("phone"),
        address=data.get("address"),
        notes=data.get("notes"),
        is_frequent=bool(data.get("is_frequent", False)),
        total_purchases=float(data.get("total_purchases") or 0.0),
    )


async def upsert_customer(db: AsyncSession, data: dict) -> Customer:
    """Insert or replace a customer by id"""
    new = build_customer(data)
    customer = await get_customer(db, new.id) if data.get("id") else None
    if customer:
        for key in ("name", "phone", "address", "notes", "is_frequent"):
            setattr(customer, key, getattr(new, key))
        if data.get("total_purchases") is not None:
            customer.total_purchases = new.total_purchases
    else:
        customer = new
        db.add(customer)

    await commit(db)
    logger.info(f"Saved customer {customer.id} ({customer.name})")
    return customer
