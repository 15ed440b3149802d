"""
Product catalog API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel

from freshpos.config import get_settings
from freshpos.database import get_db
from freshpos.exceptions import ValidationError
from freshpos.models.product import ProductCategory, UnitType
from freshpos.services import catalog
from freshpos.services.reports import low_stock
from freshpos.services.units import default_sales_entry, sales_units_for

router = APIRouter()


class ProductResponse(BaseModel):
    id: str
    name: str
    category: ProductCategory
    unit: UnitType
    price: float
    cost: float
    stock: float
    min_stock: float
    is_low_stock: bool
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductSaleOptions(BaseModel):
    product_id: str
    sales_units: List[UnitType]
    default_quantity: float
    default_unit: UnitType


class ProductCreate(BaseModel):
    name: str
    category: ProductCategory = ProductCategory.OTHER
    unit: UnitType = UnitType.UNIT
    price: float = 0.0
    cost: float = 0.0
    stock: float = 0.0
    min_stock: float = 0.0


class ProductUpdate(BaseModel):
    """Full replacement record; only stock may be left out"""
    name: str
    category: ProductCategory
    unit: UnitType
    price: float
    cost: float
    stock: Optional[float] = None  # omitted = keep current stock
    min_stock: float


@router.get("/", response_model=List[ProductResponse])
async def list_products(
    category: Optional[ProductCategory] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """List the catalog, optionally filtered by category or name"""
    return await catalog.list_products(db, category=category, search=search)


@router.get("/low-stock", response_model=List[ProductResponse])
async def list_low_stock(db: AsyncSession = Depends(get_db)):
    """Products at or under their minimum stock"""
    products = await catalog.list_products(db)
    alerts = low_stock(catalog.index_products(products))
    return alerts[:get_settings().LOW_STOCK_ALERT_LIMIT]


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, db: AsyncSession = Depends(get_db)):
    product = await catalog.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("/{product_id}/sale-options", response_model=ProductSaleOptions)
async def get_sale_options(product_id: str, db: AsyncSession = Depends(get_db)):
    """Units the counter may sell this product in, and the pre-filled entry"""
    product = await catalog.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    quantity, unit = default_sales_entry(product)
    return ProductSaleOptions(
        product_id=product.id,
        sales_units=sales_units_for(product.unit),
        default_quantity=quantity,
        default_unit=unit,
    )


@router.post("/", response_model=ProductResponse)
async def create_product(data: ProductCreate, db: AsyncSession = Depends(get_db)):
    try:
        return await catalog.upsert_product(db, data.model_dump())
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.put("/{product_id}", response_model=ProductResponse)
async def save_product(product_id: str, data: ProductUpdate, db: AsyncSession = Depends(get_db)):
    """Insert or replace the product with this id"""
    try:
        return await catalog.upsert_product(db, {**data.model_dump(), "id": product_id})
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.delete("/{product_id}")
async def delete_product(product_id: str, db: AsyncSession = Depends(get_db)):
    """Remove a product; past orders and purchases keep their snapshots"""
    if not await catalog.delete_product(db, product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    return {"message": "Product deleted", "id": product_id}
