from sqlalchemy import Column, String, Integer, Numeric, JSON, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base
from sqlalchemy.sql import func

class OrdenEntradas(Base):
    __tablename__ = "ticket_orders"

    id = Column(Integer, primary_key=True, index=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False, index=True)
    items = Column(JSON, nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)
    commission = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(20), nullable=False)  # card, transfer
    status = Column(String(20), nullable=False, default="pending")  # pending, approved, rejected
    preference_id = Column(String(100))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relaciones
    reservation = relationship("Reservacion")
