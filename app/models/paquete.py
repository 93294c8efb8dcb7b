from sqlalchemy import Column, String, Integer, Numeric, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base
from sqlalchemy.sql import func

class PaqueteReserva(Base):
    __tablename__ = "package_reservations"

    id = Column(Integer, primary_key=True, index=True)
    package_type = Column(String(30), nullable=False, index=True)  # museos, acuario_adultos, acuario_ninos
    responsible_name = Column(String(150), nullable=False)
    # Código de la reservación del viaje, texto libre (no es llave foránea)
    reservation_code = Column(String(30))
    num_people = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    amount_paid = Column(Numeric(10, 2), nullable=False, default=0)
    payment_status = Column(String(20), nullable=False, default="pendiente")  # pendiente, parcial, pagado
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relaciones
    payments = relationship(
        "PagoPaquete",
        back_populates="package_reservation",
        cascade="all, delete",
        order_by="PagoPaquete.id",
    )


class PagoPaquete(Base):
    __tablename__ = "package_payments"

    id = Column(Integer, primary_key=True, index=True)
    package_reservation_id = Column(Integer, ForeignKey("package_reservations.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    method = Column(String(50), nullable=False)
    reference = Column(String(100))
    note = Column(Text)
    paid_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relaciones
    package_reservation = relationship("PaqueteReserva", back_populates="payments")
