from pydantic import BaseModel

class ResumenFinanciero(BaseModel):
    total_reservations: int
    total_seats: int
    seats_payable: int
    total_amount: float
    total_paid: float
    total_pending: float
    pending_deposits: int

class ResumenPaquetes(BaseModel):
    total_reservations: int
    total_people: int
    total_amount: float
    total_collected: float
    pending_count: int
