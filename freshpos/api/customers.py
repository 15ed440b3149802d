"""
Customers API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from pydantic import BaseModel

from freshpos.database import get_db
from freshpos.exceptions import ValidationError
from freshpos.services import customers as customer_service

router = APIRouter()


class CustomerResponse(BaseModel):
    id: str
    name: str
    phone: Optional[str]
    address: Optional[str]
    notes: Optional[str]
    is_frequent: bool
    total_purchases: float

    class Config:
        from_attributes = True


class CustomerCreate(BaseModel):
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    is_frequent: bool = False
    total_purchases: Optional[float] = None


@router.get("/", response_model=List[CustomerResponse])
async def list_customers(search: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    """List customers, optionally matching name or phone"""
    return await customer_service.list_customers(db, search=search)


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(customer_id: str, db: AsyncSession = Depends(get_db)):
    customer = await customer_service.get_customer(db, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.post("/", response_model=CustomerResponse)
async def create_customer(data: CustomerCreate, db: AsyncSession = Depends(get_db)):
    try:
        return await customer_service.upsert_customer(db, data.model_dump())
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.put("/{customer_id}", response_model=CustomerResponse)
async def save_customer(customer_id: str, data: CustomerCreate, db: AsyncSession = Depends(get_db)):
    """Insert or replace the customer with this id"""
    try:
        return await customer_service.upsert_customer(db, {**data.model_dump(), "id": customer_id})
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
