"""
Purchase (restock) model
"""
from sqlalchemy import Column, String, Text, DateTime, Float
from freshpos.database import Base
from freshpos.utils.helpers import new_id
from datetime import datetime


class Purchase(Base):
    """Goods received from a supplier. Append-only."""
    __tablename__ = "purchases"

    id = Column(String, primary_key=True, default=new_id)
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)

    # Product snapshot
    product_id = Column(String, nullable=False, index=True)
    product_name = Column(String, nullable=False)

    quantity = Column(Float, nullable=False)  # base unit
    unit_cost = Column(Float, nullable=False)
    total_cost = Column(Float, nullable=False)

    supplier = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
