from sqlalchemy import Column, String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base
from sqlalchemy.sql import func

class GrupoTour(Base):
    __tablename__ = "tour_groups"

    id = Column(Integer, primary_key=True, index=True)
    group_name = Column(String(100), nullable=False)
    tour_datetime = Column(DateTime)
    max_members = Column(Integer, nullable=False, default=15)
    bethel_code = Column(String(50))
    captain_passenger_id = Column(Integer, ForeignKey("reservation_passengers.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relaciones
    members = relationship(
        "MiembroGrupo",
        back_populates="group",
        cascade="all, delete",
        order_by="MiembroGrupo.id",
    )
    captain = relationship("Pasajero", foreign_keys=[captain_passenger_id])


class MiembroGrupo(Base):
    __tablename__ = "tour_group_members"

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(Integer, ForeignKey("tour_groups.id", ondelete="CASCADE"), nullable=False, index=True)
    # Un pasajero solo puede pertenecer a un grupo
    passenger_id = Column(Integer, ForeignKey("reservation_passengers.id", ondelete="CASCADE"), nullable=False, unique=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relaciones
    group = relationship("GrupoTour", back_populates="members")
    passenger = relationship("Pasajero", back_populates="group_membership")
    reservation = relationship("Reservacion")
