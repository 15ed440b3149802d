"""
Inventory ledger, catalog and purchase tests
"""
import pytest
from sqlalchemy import select

from freshpos.exceptions import ValidationError
from freshpos.models.product import Product, ProductCategory, UnitType
from freshpos.models.purchase import Purchase
from freshpos.services import catalog
from freshpos.services.inventory import ReferenceGap, adjust_stock, apply_purchase, apply_sale
from freshpos.services.purchases import list_purchases, register_purchase
from freshpos.services.cart import OrderItemDraft


def make_product(id="p1", stock=10.0, cost=5.0):
    return Product(
        id=id, name=f"Product {id}", category=ProductCategory.MEAT, unit=UnitType.KG,
        price=11.0, cost=cost, stock=stock, min_stock=2,
    )


def draft(product_id, quantity, name="Item"):
    return OrderItemDraft(product_id=product_id, product_name=name, quantity=quantity, price_at_sale=1.0, cost_at_sale=None)


# ===================== LEDGER (PURE) =====================


def test_apply_sale_decrements_exact_quantities():
    products = {"a": make_product("a", stock=10), "b": make_product("b", stock=4)}
    gaps = apply_sale(products, [draft("a", 0.453592), draft("b", 1), draft("a", 2)])
    assert gaps == []
    assert products["a"].stock == pytest.approx(10 - 0.453592 - 2)
    assert products["b"].stock == 3


def test_apply_sale_does_not_clamp():
    products = {"a": make_product("a", stock=1)}
    apply_sale(products, [draft("a", 3.5)])
    assert products["a"].stock == -2.5
    assert products["a"].is_low_stock


def test_apply_sale_skips_missing_product():
    products = {"a": make_product("a", stock=5)}
    gaps = apply_sale(products, [draft("gone", 2, name="Queso Andino"), draft("a", 1)])
    assert gaps == [ReferenceGap("sale", "product", "gone", "Queso Andino")]
    assert products["a"].stock == 4


def test_apply_purchase_increments_and_overwrites_cost():
    products = {"a": make_product("a", stock=10, cost=5.80)}
    purchase = Purchase(id="x", product_id="a", product_name="A", quantity=50, unit_cost=6.00, total_cost=300)
    assert apply_purchase(products, purchase) == []
    assert products["a"].stock == 60
    assert products["a"].cost == 6.00


def test_apply_purchase_zero_cost_keeps_cost():
    products = {"a": make_product("a", stock=10, cost=5.80)}
    purchase = Purchase(id="x", product_id="a", product_name="A", quantity=5, unit_cost=0, total_cost=0)
    apply_purchase(products, purchase)
    assert products["a"].stock == 15
    assert products["a"].cost == 5.80


def test_apply_purchase_missing_product():
    purchase = Purchase(id="x", product_id="gone", product_name="Old", quantity=5, unit_cost=1, total_cost=5)
    gaps = apply_purchase({}, purchase)
    assert len(gaps) == 1
    assert gaps[0].operation == "purchase"


def test_adjust_stock_returns_delta():
    product = make_product(stock=10)
    assert adjust_stock(product, 7.5) == -2.5
    assert product.stock == 7.5


# ===================== PURCHASES (DB) =====================


async def test_register_purchase_updates_product(db_session, seed_data):
    purchase, gaps = await register_purchase(db_session, "p-chicken", 50, 6.00, supplier="Avícola San Fernando")
    assert gaps == []
    assert purchase.total_cost == 300
    assert purchase.product_name == "Pechuga de Pollo"

    chicken = await catalog.get_product(db_session, "p-chicken")
    assert chicken.stock == pytest.approx(95.5)
    assert chicken.cost == 6.00


async def test_register_purchase_for_missing_product_keeps_record(db_session, seed_data):
    purchase, gaps = await register_purchase(db_session, "p-gone", 5, 2.0, product_name="Queso Andino")
    assert gaps[0].entity_id == "p-gone"
    assert purchase.product_name == "Queso Andino"
    assert len(await list_purchases(db_session)) == 1


@pytest.mark.parametrize("quantity,unit_cost", [(0, 1.0), (-5, 1.0), (5, -1.0)])
async def test_register_purchase_rejects_bad_input(db_session, seed_data, quantity, unit_cost):
    with pytest.raises(ValidationError):
        await register_purchase(db_session, "p-chicken", quantity, unit_cost)
    result = await db_session.execute(select(Purchase))
    assert result.scalars().all() == []
    chicken = await catalog.get_product(db_session, "p-chicken")
    assert chicken.stock == 45.5


async def test_list_purchases_by_product(db_session, seed_data):
    await register_purchase(db_session, "p-chicken", 10, 6.0)
    await register_purchase(db_session, "p-eggs", 360, 0.11)
    chicken_purchases = await list_purchases(db_session, product_id="p-chicken")
    assert [p.product_id for p in chicken_purchases] == ["p-chicken"]


# ===================== CATALOG =====================


async def test_list_products_seeds_empty_catalog(db_session):
    products = await catalog.list_products(db_session)
    assert len(products) == len(catalog.DEFAULT_CATALOG)
    assert products == sorted(products, key=lambda p: p.name)


async def test_list_products_filters(db_session, seed_data):
    eggs = await catalog.list_products(db_session, category=ProductCategory.EGGS)
    assert [p.id for p in eggs] == ["p-eggs"]
    found = await catalog.list_products(db_session, search="queso")
    assert [p.id for p in found] == ["p-cheese"]


async def test_upsert_product_creates_and_replaces(db_session, seed_data):
    created = await catalog.upsert_product(db_session, {
        "name": "Carne Molida", "category": "meat", "unit": "kg", "price": 11.0, "cost": 8.5, "stock": 20,
    })
    assert created.id
    assert created.stock == 20

    updated = await catalog.upsert_product(db_session, {
        "id": created.id, "name": "Carne Molida Especial", "category": "meat", "unit": "kg",
        "price": 11.5, "cost": 8.5, "stock": None,
    })
    assert updated.id == created.id
    assert updated.name == "Carne Molida Especial"
    assert updated.stock == 20


async def test_upsert_product_manual_stock_adjustment(db_session, seed_data):
    product = await catalog.upsert_product(db_session, {
        "id": "p-cheese", "name": "Queso Fresco", "category": "cheese", "unit": "kg",
        "price": 12.0, "cost": 9.0, "stock": 14.25, "min_stock": 3,
    })
    assert product.stock == 14.25
    assert not product.is_low_stock


async def test_upsert_product_keeps_fields_left_out(db_session, seed_data):
    product = await catalog.upsert_product(db_session, {"id": "p-chicken", "name": "Pechuga de Pollo Entera"})
    assert product.name == "Pechuga de Pollo Entera"
    assert product.unit == UnitType.KG
    assert product.category == ProductCategory.CHICKEN
    assert (product.price, product.cost, product.stock, product.min_stock) == (8.50, 5.80, 45.5, 10)


async def test_upsert_product_base_unit_locked_while_in_stock(db_session, seed_data):
    with pytest.raises(ValidationError) as exc:
        await catalog.upsert_product(db_session, {"id": "p-chicken", "name": "Pechuga de Pollo", "unit": "lb"})
    assert exc.value.field == "unit"
    product = await catalog.get_product(db_session, "p-chicken")
    assert product.unit == UnitType.KG

    await catalog.upsert_product(db_session, {"id": "p-chicken", "name": "Pechuga de Pollo", "stock": 0})
    product = await catalog.upsert_product(db_session, {"id": "p-chicken", "name": "Pechuga de Pollo", "unit": "lb"})
    assert product.unit == UnitType.POUND


async def test_upsert_product_requires_name(db_session, seed_data):
    with pytest.raises(ValidationError) as exc:
        await catalog.upsert_product(db_session, {"name": "   ", "price": 1.0})
    assert exc.value.field == "name"


async def test_delete_product(db_session, seed_data):
    assert await catalog.delete_product(db_session, "p-cheese") is True
    assert await catalog.get_product(db_session, "p-cheese") is None
    assert await catalog.delete_product(db_session, "p-cheese") is False


async def test_load_product_index(db_session, seed_data):
    index = await catalog.load_product_index(db_session, ["p-eggs", "p-missing"])
    assert set(index) == {"p-eggs"}
    assert set(await catalog.load_product_index(db_session)) == {"p-eggs", "p-chicken", "p-cheese"}
