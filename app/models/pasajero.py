from sqlalchemy import Column, String, Integer, Boolean, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base
from sqlalchemy.sql import func

class Pasajero(Base):
    __tablename__ = "reservation_passengers"

    id = Column(Integer, primary_key=True, index=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, default="")
    phone = Column(String(15))
    congregation = Column(String(150))
    age = Column(Integer)
    is_free_under6 = Column(Boolean, nullable=False, default=False)
    observations = Column(Text)
    boarded = Column(Boolean, nullable=False, default=False)
    seat_number = Column(String(5))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relaciones
    reservation = relationship("Reservacion", back_populates="passengers")
    group_membership = relationship(
        "MiembroGrupo",
        back_populates="passenger",
        uselist=False,
        cascade="all, delete",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
