"""
Customer model
"""
from sqlalchemy import Column, String, Text, Boolean, Float, DateTime
from freshpos.database import Base
from freshpos.utils.helpers import new_id
from datetime import datetime


class Customer(Base):
    __tablename__ = "customers"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    is_frequent = Column(Boolean, default=False)
    total_purchases = Column(Float, default=0.0)

    created_at = Column(DateTime, default=datetime.now)
