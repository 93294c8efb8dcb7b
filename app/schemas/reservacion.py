from pydantic import BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime

from app.config import settings

class PasajeroBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field("", max_length=100)
    phone: Optional[str] = None
    congregation: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=120, description="Edad; menores de 6 años no pagan")
    observations: Optional[str] = None

    @validator('first_name', 'last_name')
    def strip_names(cls, v):
        return v.strip() if v else v

class PasajeroCreate(PasajeroBase):
    pass

class PasajeroEdit(PasajeroBase):
    """
    Pasajero dentro de una edición completa de la lista.
    Sin id es un pasajero nuevo; los pasajeros existentes que no aparezcan se eliminan.
    """
    id: Optional[int] = None
    seat_number: Optional[str] = None

class PasajeroResponse(PasajeroBase):
    id: int
    reservation_id: int
    is_free_under6: bool
    boarded: bool
    seat_number: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ReservacionCreate(BaseModel):
    responsible_name: str = Field(..., min_length=2, max_length=150)
    responsible_phone: str = Field(..., description="Teléfono a 10 dígitos")
    responsible_congregation: Optional[str] = None
    seats_total: int = Field(..., ge=1, description="Lugares solicitados")
    minors_count: int = Field(0, ge=0, description="Menores de 6 años incluidos en los lugares")
    passengers: List[PasajeroCreate] = Field(default_factory=list)
    payment_method: Optional[str] = Field(None, pattern="^(card|transfer)$")

    @validator('responsible_name')
    def strip_name(cls, v):
        return v.strip()

    @validator('responsible_phone')
    def phone_digits(cls, v):
        digits = "".join(ch for ch in v if ch.isdigit())
        if len(digits) != 10:
            raise ValueError('El teléfono debe tener 10 dígitos')
        return digits

    @validator('seats_total')
    def seats_available(cls, v):
        if v > settings.TOTAL_SEATS:
            raise ValueError(f'No se pueden reservar más de {settings.TOTAL_SEATS} lugares')
        return v

    @validator('minors_count')
    def minors_within_seats(cls, v, values):
        seats = values.get('seats_total')
        if seats is not None and v > seats:
            raise ValueError('Los menores no pueden ser más que los lugares')
        return v

class ReservacionUpdate(BaseModel):
    responsible_name: Optional[str] = Field(None, min_length=2, max_length=150)
    responsible_phone: Optional[str] = None
    responsible_congregation: Optional[str] = None
    is_host: Optional[bool] = None
    passengers: Optional[List[PasajeroEdit]] = None

    @validator('responsible_phone')
    def phone_digits(cls, v):
        if v is None:
            return v
        digits = "".join(ch for ch in v if ch.isdigit())
        if len(digits) != 10:
            raise ValueError('El teléfono debe tener 10 dígitos')
        return digits

class EstadoUpdate(BaseModel):
    status: str = Field(..., pattern="^(pendiente|anticipo_pagado|pagado_completo|cancelado)$")

class PagoResumen(BaseModel):
    id: int
    amount: float
    method: str
    reference: Optional[str] = None
    note: Optional[str] = None
    paid_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ReservacionResponse(BaseModel):
    id: int
    reservation_code: str
    responsible_name: str
    responsible_phone: str
    responsible_congregation: Optional[str] = None
    seats_total: int
    seats_payable: int
    unit_price: float
    total_amount: float
    deposit_required: float
    amount_paid: float
    status: str
    is_host: bool
    payment_method: Optional[str] = None
    mp_payment_status: Optional[str] = None
    created_at: Optional[datetime] = None
    passengers: List[PasajeroResponse] = []

    class Config:
        from_attributes = True

class ReservacionAdminResponse(ReservacionResponse):
    """Vista de administración: incluye el código de abordaje y los pagos."""
    boarding_access_code: str
    payments: List[PagoResumen] = []

class ConfirmacionReserva(BaseModel):
    """Respuesta del flujo de reserva: datos para la pantalla de confirmación."""
    reservation: ReservacionResponse
    boarding_access_code: str
    whatsapp_message: str
    whatsapp_link: str

class CambioReconciliacion(BaseModel):
    reservation_id: int
    reservation_code: str
    changes: dict
    passengers_fixed: int

class ReporteReconciliacion(BaseModel):
    reservations_checked: int
    reservations_updated: int
    passengers_updated: int
    details: List[CambioReconciliacion] = []
