from pydantic import BaseModel, Field
from typing import List

from app.schemas.reservacion import PasajeroEdit, ReservacionResponse

class AccesoReservacion(BaseModel):
    reservation_code: str = Field(..., min_length=1)
    boarding_access_code: str = Field(..., min_length=1)

class ModificacionRequest(AccesoReservacion):
    passengers: List[PasajeroEdit] = Field(..., min_length=1)

class ModificacionResponse(BaseModel):
    reservation: ReservacionResponse
    new_total: float
    # Positivo: falta por pagar. Negativo: saldo a favor.
    difference: float
    needs_refund: bool
