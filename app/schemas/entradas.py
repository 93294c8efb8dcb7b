from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

class ItemEntrada(BaseModel):
    variant_id: str
    passenger_id: Optional[int] = None
    passenger_name: Optional[str] = None
    quantity: int = Field(1, gt=0)

class OrdenCreate(BaseModel):
    reservation_code: str
    items: List[ItemEntrada] = Field(..., min_length=1)
    payment_method: str = Field(..., pattern="^(card|transfer)$")

class OrdenResponse(BaseModel):
    id: int
    reservation_id: int
    items: list
    subtotal: float
    commission: float
    total_amount: float
    payment_method: str
    status: str
    preference_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class OrdenCreada(BaseModel):
    order: OrdenResponse
    init_point: Optional[str] = None
