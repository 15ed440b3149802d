"""
Purchases API endpoints - restock entries
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel

from freshpos.database import get_db
from freshpos.exceptions import ValidationError
from freshpos.services import purchases as purchase_service

router = APIRouter()


class PurchaseResponse(BaseModel):
    id: str
    created_at: datetime
    product_id: str
    product_name: str
    quantity: float
    unit_cost: float
    total_cost: float
    supplier: Optional[str]
    notes: Optional[str]

    class Config:
        from_attributes = True


class PurchaseCreate(BaseModel):
    product_id: str
    quantity: float
    unit_cost: float
    supplier: Optional[str] = None
    notes: Optional[str] = None


class PurchaseCreatedResponse(BaseModel):
    purchase: PurchaseResponse
    warnings: List[str] = []


@router.get("/", response_model=List[PurchaseResponse])
async def list_purchases(product_id: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    return await purchase_service.list_purchases(db, product_id=product_id)


@router.post("/", response_model=PurchaseCreatedResponse)
async def register_purchase(data: PurchaseCreate, db: AsyncSession = Depends(get_db)):
    """Record goods received; stock goes up and the product cost is refreshed"""
    try:
        purchase, gaps = await purchase_service.register_purchase(
            db,
            product_id=data.product_id,
            quantity=data.quantity,
            unit_cost=data.unit_cost,
            supplier=data.supplier,
            notes=data.notes,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return PurchaseCreatedResponse(
        purchase=PurchaseResponse.model_validate(purchase),
        warnings=[f"{gap.entity} {gap.entity_id} not found, stock not updated" for gap in gaps],
    )
