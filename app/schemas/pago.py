from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class PagoBase(BaseModel):
    amount: float = Field(..., gt=0, description="Monto del pago")
    method: str = Field("transferencia", max_length=50)
    reference: Optional[str] = Field(None, max_length=100)
    note: Optional[str] = None

class PagoCreate(PagoBase):
    reservation_id: int

class PagoResponse(PagoBase):
    id: int
    reservation_id: int
    paid_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PagoRegistrado(BaseModel):
    """Pago insertado junto con el nuevo estado de la reservación."""
    payment: PagoResponse
    amount_paid: float
    total_amount: float
    status: str

# ----------------------------------------------------
# MERCADO PAGO
# ----------------------------------------------------

class PreferenciaRequest(BaseModel):
    reservation_id: int
    # Sin monto se cobra el saldo pendiente; con is_deposit se cobra el anticipo
    amount: Optional[float] = Field(None, gt=0)
    is_deposit: bool = False
    description: Optional[str] = None

class PreferenciaResponse(BaseModel):
    preference_id: str
    init_point: str
    sandbox_init_point: Optional[str] = None

class WebhookData(BaseModel):
    """Notificación de Mercado Pago. Solo se reconocen las de tipo 'payment'."""
    type: Optional[str] = None
    action: Optional[str] = None
    data: Optional[dict] = None

    class Config:
        extra = 'ignore'
