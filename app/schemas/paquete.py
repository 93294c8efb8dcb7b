from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

class PaqueteCatalogo(BaseModel):
    package_type: str
    name: str
    description: str
    price: float

class PaqueteReservaCreate(BaseModel):
    package_type: str
    responsible_name: str = Field(..., min_length=1, max_length=150)
    reservation_code: Optional[str] = None
    num_people: int = Field(1, gt=0)
    notes: Optional[str] = None

class PaqueteReservaUpdate(BaseModel):
    responsible_name: Optional[str] = Field(None, min_length=1, max_length=150)
    reservation_code: Optional[str] = None
    num_people: Optional[int] = Field(None, gt=0)
    notes: Optional[str] = None

class PaqueteReservaResponse(BaseModel):
    id: int
    package_type: str
    responsible_name: str
    reservation_code: Optional[str] = None
    num_people: int
    unit_price: float
    total_amount: float
    amount_paid: float
    payment_status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PagoPaqueteCreate(BaseModel):
    amount: float = Field(..., gt=0)
    method: str = Field("efectivo", max_length=50)
    reference: Optional[str] = Field(None, max_length=100)
    note: Optional[str] = None

class ConsolidarRequest(BaseModel):
    ids: List[int] = Field(..., min_length=2)

class ItemConsolidado(BaseModel):
    package_type: str
    num_people: int
    total_amount: float
    amount_paid: float
    ids: List[int]

class ReservaAgrupada(BaseModel):
    reservation_code: str
    responsible_name: str
    items: List[ItemConsolidado]
    total_amount: float
    total_paid: float
    total_pending: float
    payment_status: str
