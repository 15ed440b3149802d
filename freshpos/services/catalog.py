"""
Product catalog: listing, insert-or-replace, removal, and the indexed product
repository handed to the inventory ledger and the reports.
"""
import logging
from typing import Dict, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from freshpos.config import get_settings
from freshpos.database import commit
from freshpos.exceptions import ValidationError
from freshpos.models.product import Product, ProductCategory, UnitType
from freshpos.services.inventory import adjust_stock
from freshpos.services.units import as_unit
from freshpos.utils.helpers import new_id
from freshpos.utils.validators import validate_required_text, validate_non_negative_amount

logger = logging.getLogger(__name__)

ProductIndex = Dict[str, Product]

# name, category, base unit, price, cost, stock, min stock
DEFAULT_CATALOG = [
    ("Huevo Rosado Calidad A", ProductCategory.EGGS, UnitType.UNIT, 0.18, 0.12, 1500, 300),
    ("Pechuga de Pollo", ProductCategory.CHICKEN, UnitType.KG, 8.50, 6.00, 45.5, 10),
    ("Queso Fresco", ProductCategory.CHEESE, UnitType.KG, 12.00, 9.00, 15.2, 3),
    ("Queso Andino (Entero/Porción)", ProductCategory.CHEESE, UnitType.KG, 15.50, 11.00, 8.0, 2),
    ("Carne Molida Especial", ProductCategory.MEAT, UnitType.KG, 11.00, 8.50, 20, 5),
    ("Milanesa de Pollo", ProductCategory.CHICKEN, UnitType.KG, 9.50, 7.00, 12, 2),
    ("Huevo Pardo (Económico)", ProductCategory.EGGS, UnitType.UNIT, 0.15, 0.10, 800, 100),
]


def index_products(products: Iterable[Product]) -> ProductIndex:
    """Map product id -> product"""
    return {p.id: p for p in products}


async def load_product_index(db: AsyncSession, product_ids: Optional[Iterable[str]] = None) -> ProductIndex:
    """Indexed repository of all products, or only of the given ids"""
    query = select(Product)
    if product_ids is not None:
        query = query.where(Product.id.in_(set(product_ids)))
    result = await db.execute(query)
    return index_products(result.scalars().all())


async def seed_default_catalog(db: AsyncSession) -> list[Product]:
    products = [
        Product(
            id=new_id(), name=name, category=category, unit=unit,
            price=price, cost=cost, stock=stock, min_stock=min_stock,
        )
        for name, category, unit, price, cost, stock, min_stock in DEFAULT_CATALOG
    ]
    db.add_all(products)
    await commit(db)
    logger.info(f"Seeded {len(products)} products")
    return products


async def list_products(
    db: AsyncSession,
    category: Optional[ProductCategory] = None,
    search: Optional[str] = None,
) -> list[Product]:
    """All products by name; seeds the default catalog when the table is empty"""
    result = await db.execute(select(Product).order_by(Product.name))
    products = list(result.scalars().all())

    if not products and get_settings().SEED_DEFAULT_DATA:
        products = sorted(await seed_default_catalog(db), key=lambda p: p.name)

    if category:
        products = [p for p in products if p.category == category]
    if search:
        needle = search.strip().lower()
        products = [p for p in products if needle in p.name.lower()]
    return products


async def get_product(db: AsyncSession, product_id: str) -> Optional[Product]:
    result = await db.execute(select(Product).where(Product.id == product_id))
    return result.scalar_one_or_none()


async def upsert_product(db: AsyncSession, data: dict) -> Product:
    """
    Insert or replace a product by id.

    Fields left out of `data` keep their current value on an existing
    product. The base unit cannot change while the product holds stock.
    Editing stock here is the manual adjustment path; restocks go through
    purchases and sales through orders.
    """
    product = await get_product(db, data["id"]) if data.get("id") else None

    def value(key, default):
        if data.get(key) is not None:
            return data[key]
        return getattr(product, key) if product else default

    fields = {
        "name": validate_required_text(data.get("name"), "name"),
        "category": ProductCategory(value("category", ProductCategory.OTHER)),
        "unit": as_unit(value("unit", UnitType.UNIT)),
        "price": validate_non_negative_amount(value("price", 0.0), "price"),
        "cost": validate_non_negative_amount(value("cost", 0.0), "cost"),
        "min_stock": validate_non_negative_amount(value("min_stock", 0.0), "min_stock"),
    }
    stock = data.get("stock")

    if product:
        if fields["unit"] != product.unit and (product.stock or 0.0) != 0:
            raise ValidationError(
                f"Cannot change the base unit of {product.name} from {product.unit.value} "
                f"to {fields['unit'].value} while {product.stock:g} are in stock",
                field="unit",
            )
        for key, new_value in fields.items():
            setattr(product, key, new_value)
        if stock is not None and stock != product.stock:
            adjust_stock(product, float(stock))
    else:
        product = Product(id=data.get("id") or new_id(), stock=float(stock or 0.0), **fields)
        db.add(product)

    await commit(db)
    logger.info(f"Saved product {product.id} ({product.name})")
    return product


async def delete_product(db: AsyncSession, product_id: str) -> bool:
    """Remove a product. Orders and purchases keep their own snapshots."""
    product = await get_product(db, product_id)
    if not product:
        return False
    await db.delete(product)
    await commit(db)
    logger.info(f"Deleted product {product_id} ({product.name})")
    return True
