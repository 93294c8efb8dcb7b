import logging
from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.administrador import Administrador
from app.schemas.auth import Token
from app.core.security import verify_password, create_access_token, get_current_admin
from app.core.exceptions import AuthException

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    email = form_data.username.strip().lower()
    admin = db.query(Administrador).filter(Administrador.email == email).first()

    if not admin or not admin.active or not verify_password(form_data.password, admin.hashed_password):
        logger.warning(f"❌ Inicio de sesión fallido para {email}")
        raise AuthException("Credenciales incorrectas")

    access_token = create_access_token(data={"sub": admin.email})
    logger.info(f"🔐 Sesión iniciada: {admin.email}")

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "email": admin.email,
    }

@router.get("/me")
def me(admin: Administrador = Depends(get_current_admin)):
    return {"email": admin.email}
