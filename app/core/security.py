import logging
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from app.config import settings
from app.core.exceptions import AuthException, ForbiddenException
from app.database import get_db
from app.models.administrador import Administrador

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})

    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt

def verify_token(token: str):
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return payload
    except JWTError:
        return None

def get_current_admin(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> Administrador:
    """
    Valida el token y vuelve a consultar la lista de administradores en cada petición:
    un correo dado de baja pierde el acceso aunque su token siga vigente.
    """
    if token is None:
        raise AuthException("No se pudieron validar las credenciales")

    payload = verify_token(token)
    email = payload.get("sub") if payload else None
    if email is None:
        raise AuthException("No se pudieron validar las credenciales")

    admin = db.query(Administrador).filter(Administrador.email == email).first()
    if admin is None or not admin.active:
        logger.warning(f"⚠️ Acceso denegado, {email} no es administrador")
        raise ForbiddenException("Usuario no es administrador")

    return admin
