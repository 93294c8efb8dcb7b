# 📍 ARCHIVO: app/routers/modificacion.py
# 🎯 PROPÓSITO: Modificación de la reservación por el propio responsable,
# autenticado con su código de reservación y su código de abordaje.

import logging
import secrets
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import AuthException, BadRequestException, ForbiddenException, NotFoundException
from app.core.pricing import CANCELADO, is_free_under6, to_decimal
from app.database import get_db
from app.models.pasajero import Pasajero
from app.models.reservacion import Reservacion
from app.schemas.modificacion import AccesoReservacion, ModificacionRequest, ModificacionResponse
from app.schemas.reservacion import ReservacionResponse
from app.services.reservaciones import aplicar_edicion_pasajeros, buscar_por_codigo

logger = logging.getLogger(__name__)
router = APIRouter()


def autenticar_reservacion(db: Session, acceso: AccesoReservacion) -> Reservacion:
    reservacion = buscar_por_codigo(db, acceso.reservation_code)
    if not reservacion:
        raise NotFoundException("Código de reservación no encontrado")

    esperado = reservacion.boarding_access_code.encode()
    if not secrets.compare_digest(esperado, acceso.boarding_access_code.strip().encode()):
        logger.warning(f"❌ Código de abordaje incorrecto para {reservacion.reservation_code}")
        raise AuthException("Código de abordaje incorrecto")

    if reservacion.status == CANCELADO:
        raise BadRequestException("Esta reservación está cancelada")

    return reservacion


@router.post("/acceso", response_model=ReservacionResponse)
def acceder(acceso: AccesoReservacion, db: Session = Depends(get_db)):
    return autenticar_reservacion(db, acceso)


@router.put("/", response_model=ModificacionResponse)
def modificar(data: ModificacionRequest, db: Session = Depends(get_db)):
    """
    Reemplaza la lista de pasajeros. Los asientos no se pueden cambiar desde aquí.
    Devuelve la diferencia contra lo ya pagado y si procede un reembolso.
    """
    if datetime.now() > settings.MODIFICATION_DEADLINE:
        raise ForbiddenException("La fecha límite para modificar reservaciones ya pasó")

    reservacion = autenticar_reservacion(db, data)

    pasajeros_antes = db.query(Pasajero).filter(Pasajero.reservation_id == reservacion.id).all()
    pagaban_antes = sum(1 for p in pasajeros_antes if not is_free_under6(p.age))

    try:
        # Los asientos se conservan: solo el administrador los asigna
        aplicar_edicion_pasajeros(db, reservacion, data.passengers, permitir_asientos=False)
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception(f"❌ Error al modificar la reservación {reservacion.reservation_code}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al guardar los cambios",
        )

    db.refresh(reservacion)
    total = to_decimal(reservacion.total_amount)
    pagado = to_decimal(reservacion.amount_paid)
    logger.info(
        f"✏️ Reservación {reservacion.reservation_code} modificada por el responsable: "
        f"{pagaban_antes} → {reservacion.seats_payable} lugares pagados"
    )

    return {
        "reservation": reservacion,
        "new_total": total,
        "difference": total - pagado,
        "needs_refund": reservacion.seats_payable < pagaban_antes and pagado > 0,
    }
