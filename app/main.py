# En main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.database import engine, Base
from app.config import settings
from app.core.logging_config import configure_logging
from app.routers import (
    auth,
    reservaciones,
    modificacion,
    pasajeros,
    pagos,
    grupos,
    paquetes,
    entradas,
    reportes,
)

configure_logging()
logger = logging.getLogger("app.main")

app = FastAPI(
    title="Vamos a Betel 2026 - Reservaciones",
    description="API para reservaciones del viaje, pasajeros, pagos, grupos y paquetes",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configuración CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "Accept",
        "Origin",
        "X-Requested-With",
    ],
    expose_headers=["*"],
    max_age=600,
)


@app.on_event("startup")
def crear_tablas():
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Tablas verificadas")


# Routers
app.include_router(auth.router, prefix="/auth", tags=["Autenticación"])
app.include_router(reservaciones.router, prefix="/reservaciones", tags=["Reservaciones"])
app.include_router(modificacion.router, prefix="/modificar-reservacion", tags=["Modificar Reservación"])
app.include_router(pasajeros.router, prefix="/pasajeros", tags=["Pasajeros"])
app.include_router(pagos.router, prefix="/pagos", tags=["Pagos"])
app.include_router(grupos.router, prefix="/grupos", tags=["Grupos"])
app.include_router(paquetes.router, prefix="/paquetes", tags=["Paquetes"])
app.include_router(entradas.router, prefix="/entradas", tags=["Entradas"])
app.include_router(reportes.router, prefix="/reportes", tags=["Reportes"])

@app.get("/")
def read_root():
    return {
        "mensaje": "Vamos a Betel API funcionando correctamente",
        "version": "1.0.0"
    }

@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "service": "Vamos a Betel API",
    }
