from sqlalchemy import Column, String, Integer, Boolean, DateTime
from app.database import Base
from sqlalchemy.sql import func

class Administrador(Base):
    """Lista de correos autorizados para el panel de administración."""
    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(150), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
