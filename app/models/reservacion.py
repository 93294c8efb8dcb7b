from sqlalchemy import Column, String, Integer, Numeric, Boolean, DateTime
from sqlalchemy.orm import relationship
from app.database import Base
from sqlalchemy.sql import func

class Reservacion(Base):
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    reservation_code = Column(String(20), unique=True, nullable=False, index=True)
    boarding_access_code = Column(String(10), nullable=False)
    responsible_name = Column(String(150), nullable=False)
    responsible_phone = Column(String(15), nullable=False)
    responsible_congregation = Column(String(150))
    seats_total = Column(Integer, nullable=False, default=0)
    seats_payable = Column(Integer, nullable=False, default=0)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    deposit_required = Column(Numeric(10, 2), nullable=False, default=0)
    amount_paid = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default="pendiente")  # pendiente, anticipo_pagado, pagado_completo, cancelado
    is_host = Column(Boolean, nullable=False, default=False)  # anfitriones: fuera de los reportes financieros
    payment_method = Column(String(20))  # card, transfer
    mp_payment_status = Column(String(20))  # pending, approved, rejected
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relaciones
    passengers = relationship(
        "Pasajero",
        back_populates="reservation",
        cascade="all, delete",
        order_by="Pasajero.id",
    )
    payments = relationship(
        "Pago",
        back_populates="reservation",
        cascade="all, delete",
        order_by="Pago.id",
    )
