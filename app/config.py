# app/config.py

from datetime import datetime
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./betel.db"

    # JWT
    SECRET_KEY: str = "supersecreto123"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Logging
    LOG_LEVEL: str = "INFO"

    # =======================================================
    # 🚌 REGLAS DEL VIAJE
    # =======================================================
    # Precio único por asiento pagado (los menores de 6 años no pagan)
    UNIT_PRICE: int = 1800
    DEPOSIT_RATIO: float = 0.5
    FREE_AGE_LIMIT: int = 6
    TOTAL_SEATS: int = 47
    # Después de esta fecha los responsables ya no pueden modificar su reservación
    MODIFICATION_DEADLINE: datetime = datetime(2026, 3, 1, 23, 59, 59)
    RESERVATION_CODE_PREFIX: str = "BETEL"

    # Mensajería
    WHATSAPP_NUMBER: str = "5219618720544"
    TRANSFER_CLABE: str = "722969010994673004"
    TRANSFER_BANK: str = "Mercado Pago"
    TRANSFER_BENEFICIARY: str = "Gady Hernández"

    # =======================================================
    # 💳 CONFIGURACIÓN DE MERCADO PAGO
    # =======================================================
    MP_API_URL: str = "https://api.mercadopago.com"
    MP_ACCESS_TOKEN: Optional[str] = None
    MP_CURRENCY: str = "MXN"
    CARD_COMMISSION_RATE: float = 0.05
    # URL pública de la aplicación para los back_urls de Mercado Pago
    APP_BASE_URL: str = "https://vamosabetel.vercel.app"
    # =======================================================

    # CORS
    FRONTEND_URLS: str = "http://localhost:5173,http://localhost:3000"

    @property
    def allowed_origins(self) -> List[str]:
        urls = self.FRONTEND_URLS.split(",")
        all_urls = []
        for url in urls:
            url = url.strip()
            if url:
                all_urls.append(url)
                # Añadir versión HTTPS si es HTTP
                if url.startswith("http://"):
                    all_urls.append(url.replace("http://", "https://"))
        return all_urls

    class Config:
        env_file = ".env"

settings = Settings()
