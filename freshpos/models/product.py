"""
Product model
"""
from sqlalchemy import Column, String, Float, DateTime, Enum as SQLEnum
from freshpos.database import Base
from freshpos.utils.helpers import new_id
from datetime import datetime
from enum import Enum


class ProductCategory(str, Enum):
    EGGS = "eggs"
    CHICKEN = "chicken"
    CHEESE = "cheese"
    MEAT = "meat"
    OTHER = "other"


class UnitType(str, Enum):
    UNIT = "unit"
    KG = "kg"
    POUND = "lb"
    TRAY = "tray"
    LITER = "liter"


class Product(Base):
    """Catalog item. Price, cost and stock are all per one base unit."""
    __tablename__ = "products"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False, index=True)
    category = Column(SQLEnum(ProductCategory, native_enum=False), nullable=False, default=ProductCategory.OTHER)
    unit = Column(SQLEnum(UnitType, native_enum=False), nullable=False, default=UnitType.UNIT)  # base unit

    price = Column(Float, nullable=False, default=0.0)  # sale price per base unit
    cost = Column(Float, nullable=False, default=0.0)  # purchase cost per base unit, overwritten on restock
    stock = Column(Float, nullable=False, default=0.0)  # may go negative when oversold
    min_stock = Column(Float, nullable=False, default=0.0)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    @property
    def is_low_stock(self) -> bool:
        return (self.stock or 0.0) <= (self.min_stock or 0.0)
