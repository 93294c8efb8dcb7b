import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session, joinedload, selectinload

from app.config import settings
from app.core.exceptions import NotFoundException
from app.core.pricing import ANTICIPO_PAGADO, CANCELADO, PAGADO_COMPLETO
from app.core.security import get_current_admin
from app.database import get_db
from app.models.administrador import Administrador
from app.models.pasajero import Pasajero
from app.models.reservacion import Reservacion
from app.services.reconciliation import reconcile_reservation
from app.services.reservaciones import eliminar_pasajero, validar_asiento

logger = logging.getLogger(__name__)
router = APIRouter()

class AsientoUpdate(BaseModel):
    seat_number: Optional[str] = None

class AbordajeUpdate(BaseModel):
    boarded: bool


def _pasajero_dict(p: Pasajero) -> dict:
    return {
        "id": p.id,
        "first_name": p.first_name,
        "last_name": p.last_name,
        "age": p.age,
        "congregation": p.congregation,
        "is_free_under6": p.is_free_under6,
        "seat_number": p.seat_number,
        "boarded": p.boarded,
        "reservation_id": p.reservation_id,
        "reservation_code": p.reservation.reservation_code,
        "responsible_name": p.reservation.responsible_name,
        "responsible_phone": p.reservation.responsible_phone,
        "reservation_status": p.reservation.status,
    }


def _obtener_pasajero(db: Session, passenger_id: int) -> Pasajero:
    pasajero = db.query(Pasajero).options(
        joinedload(Pasajero.reservation)
    ).filter(Pasajero.id == passenger_id).first()
    if not pasajero:
        raise NotFoundException("Pasajero no encontrado")
    return pasajero


@router.get("/")
def listar_pasajeros(
    filtro: Optional[str] = Query(None, pattern="^(paying|free)$"),
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    """Pasajeros de reservaciones no canceladas con totales de pagantes y gratuitos."""
    pasajeros = db.query(Pasajero).join(Reservacion).options(
        joinedload(Pasajero.reservation)
    ).filter(
        Reservacion.status != CANCELADO
    ).order_by(Pasajero.last_name, Pasajero.first_name).all()

    stats = {
        "total": len(pasajeros),
        "paying": sum(1 for p in pasajeros if not p.is_free_under6),
        "free": sum(1 for p in pasajeros if p.is_free_under6),
    }

    if filtro == "paying":
        pasajeros = [p for p in pasajeros if not p.is_free_under6]
    elif filtro == "free":
        pasajeros = [p for p in pasajeros if p.is_free_under6]

    return {"stats": stats, "passengers": [_pasajero_dict(p) for p in pasajeros]}


@router.get("/asientos")
def mapa_asientos(db: Session = Depends(get_db), admin: Administrador = Depends(get_current_admin)):
    """Mapa del autobús: asiento → pasajero, solo reservaciones no canceladas."""
    pasajeros = db.query(Pasajero).join(Reservacion).options(
        joinedload(Pasajero.reservation)
    ).filter(
        Reservacion.status != CANCELADO,
        Pasajero.seat_number.isnot(None),
    ).all()

    asientos = {}
    for p in pasajeros:
        seat = (p.seat_number or "").strip()
        if not seat:
            continue
        asientos[seat] = {
            "passenger": p.full_name,
            "passenger_id": p.id,
            "reservation_id": p.reservation_id,
            "reservation_code": p.reservation.reservation_code,
        }

    return {
        "total_seats": settings.TOTAL_SEATS,
        "occupied": len(asientos),
        "available": settings.TOTAL_SEATS - len(asientos),
        "seats": asientos,
    }


@router.get("/abordaje")
def lista_de_abordaje(
    q: Optional[str] = Query(None, description="Código, responsable, código de abordaje o congregación"),
    pestana: Optional[str] = Query(None, pattern="^(pending|boarded)$"),
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    """
    Lista de abordaje agrupada por reservación, solo reservaciones con
    anticipo o pago completo. Los totales no dependen de los filtros.
    """
    reservaciones = db.query(Reservacion).options(
        selectinload(Reservacion.passengers)
    ).filter(
        Reservacion.status.in_([ANTICIPO_PAGADO, PAGADO_COMPLETO])
    ).order_by(Reservacion.responsible_name, Reservacion.id).all()

    todos = [p for r in reservaciones for p in r.passengers]
    a_bordo = sum(1 for p in todos if p.boarded)
    stats = {"total": len(todos), "boarded": a_bordo, "pending": len(todos) - a_bordo}

    termino = (q or "").strip().lower()
    grupos = []
    for r in reservaciones:
        pasajeros = sorted(r.passengers, key=lambda p: (p.first_name.lower(), p.id))
        if pestana == "boarded":
            pasajeros = [p for p in pasajeros if p.boarded]
        elif pestana == "pending":
            pasajeros = [p for p in pasajeros if not p.boarded]

        if termino:
            campos = (r.reservation_code, r.responsible_name, r.boarding_access_code, r.responsible_congregation)
            if not any(termino in (campo or "").lower() for campo in campos):
                continue
        elif not pasajeros:
            continue

        grupos.append({
            "reservation_id": r.id,
            "reservation_code": r.reservation_code,
            "responsible_name": r.responsible_name,
            "responsible_phone": r.responsible_phone,
            "responsible_congregation": r.responsible_congregation,
            "boarding_access_code": r.boarding_access_code,
            "status": r.status,
            "passengers": [
                {
                    "id": p.id,
                    "first_name": p.first_name,
                    "last_name": p.last_name,
                    "age": p.age,
                    "is_free_under6": p.is_free_under6,
                    "seat_number": p.seat_number,
                    "boarded": p.boarded,
                }
                for p in pasajeros
            ],
        })

    return {"stats": stats, "reservations": grupos}


@router.patch("/{passenger_id}/asiento")
def asignar_asiento(
    passenger_id: int,
    data: AsientoUpdate,
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    pasajero = _obtener_pasajero(db, passenger_id)
    pasajero.seat_number = validar_asiento(db, data.seat_number, pasajero.id)
    db.commit()

    logger.info(f"💺 Asiento {pasajero.seat_number} asignado a {pasajero.full_name}")
    return _pasajero_dict(pasajero)


@router.patch("/{passenger_id}/abordaje")
def marcar_abordaje(
    passenger_id: int,
    data: AbordajeUpdate,
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    pasajero = _obtener_pasajero(db, passenger_id)
    pasajero.boarded = data.boarded
    db.commit()
    return _pasajero_dict(pasajero)


@router.delete("/{passenger_id}")
def eliminar(
    passenger_id: int,
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    """Borrado definitivo del pasajero; los totales de la reservación se recalculan en la misma transacción."""
    pasajero = _obtener_pasajero(db, passenger_id)
    reservacion = pasajero.reservation
    nombre = pasajero.full_name

    try:
        eliminar_pasajero(db, pasajero)
        reconcile_reservation(db, reservacion)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"❌ Error al eliminar el pasajero {passenger_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al eliminar el pasajero",
        )

    logger.info(f"🗑️ Pasajero {nombre} eliminado de {reservacion.reservation_code} por {admin.email}")
    return {
        "detail": "Pasajero eliminado",
        "reservation_id": reservacion.id,
        "seats_total": reservacion.seats_total,
        "seats_payable": reservacion.seats_payable,
        "total_amount": float(reservacion.total_amount),
        "status": reservacion.status,
    }
