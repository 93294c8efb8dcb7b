# 📍 ARCHIVO: app/routers/reservaciones.py
# 🎯 PROPÓSITO: Flujo de reserva del viaje y administración de reservaciones

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import NotFoundException
from app.core.pricing import CANCELADO, PENDIENTE, RESERVATION_STATUSES
from app.core.security import get_current_admin
from app.core.whatsapp import build_whatsapp_message, get_whatsapp_link
from app.database import get_db
from app.models.administrador import Administrador
from app.models.reservacion import Reservacion
from app.schemas.reservacion import (
    ConfirmacionReserva,
    EstadoUpdate,
    ReporteReconciliacion,
    ReservacionAdminResponse,
    ReservacionCreate,
    ReservacionResponse,
    ReservacionUpdate,
)
from app.services.reconciliation import reconcile_all, reconcile_reservation
from app.services.reservaciones import aplicar_edicion_pasajeros, crear_reservacion, validar_asiento

logger = logging.getLogger(__name__)
router = APIRouter()


def obtener_reservacion(db: Session, reservation_id: int) -> Reservacion:
    reservacion = db.query(Reservacion).options(
        selectinload(Reservacion.passengers),
        selectinload(Reservacion.payments),
    ).filter(Reservacion.id == reservation_id).first()

    if not reservacion:
        raise NotFoundException("Reservación no encontrada")
    return reservacion


@router.post("/", response_model=ConfirmacionReserva, status_code=status.HTTP_201_CREATED)
def crear_reserva(data: ReservacionCreate, db: Session = Depends(get_db)):
    """
    Paso final del flujo de reserva (lugares → pasajeros → resumen → pago).
    Es la única transición persistente: todo se confirma en una sola transacción.
    """
    try:
        reservacion = crear_reservacion(db, data)
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception("❌ Error al crear la reservación")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al crear la reservación. Por favor intenta de nuevo.",
        )

    reservacion = obtener_reservacion(db, reservacion.id)
    mensaje = build_whatsapp_message(
        reservacion.reservation_code,
        reservacion.responsible_name,
        reservacion.responsible_phone,
        reservacion.responsible_congregation,
        reservacion.passengers,
        reservacion.seats_payable,
        reservacion.total_amount,
        reservacion.deposit_required,
    )

    return {
        "reservation": reservacion,
        "boarding_access_code": reservacion.boarding_access_code,
        "whatsapp_message": mensaje,
        "whatsapp_link": get_whatsapp_link(mensaje),
    }


@router.get("/", response_model=List[ReservacionAdminResponse])
def listar_reservas(
    estado: Optional[str] = Query(None, description="Filtrar por estado"),
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    """Listado de administración. Solo lectura: la reconciliación ocurre al escribir."""
    if estado and estado not in RESERVATION_STATUSES:
        raise HTTPException(status_code=400, detail=f"Estado inválido: {estado}")

    query = db.query(Reservacion).options(
        selectinload(Reservacion.passengers),
        selectinload(Reservacion.payments),
    )
    if estado:
        query = query.filter(Reservacion.status == estado)

    return query.order_by(Reservacion.created_at.desc(), Reservacion.id.desc()).all()


@router.post("/reconciliar", response_model=ReporteReconciliacion)
def reconciliar_todo(db: Session = Depends(get_db), admin: Administrador = Depends(get_current_admin)):
    """Recalcula todas las reservaciones a partir de sus pasajeros y pagos."""
    logger.info(f"🔄 Reconciliación completa solicitada por {admin.email}")
    try:
        reporte = reconcile_all(db)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al reconciliar las reservaciones",
        )

    return {
        "reservations_checked": reporte.reservations_checked,
        "reservations_updated": reporte.reservations_updated,
        "passengers_updated": reporte.passengers_updated,
        "details": [
            {
                "reservation_id": plan.reservation_id,
                "reservation_code": plan.reservation_code,
                "changes": {
                    campo: {"antes": str(antes), "despues": str(despues)}
                    for campo, (antes, despues) in plan.changes.items()
                },
                "passengers_fixed": len(plan.passenger_fixes),
            }
            for plan in reporte.plans
        ],
    }


@router.get("/buscar", response_model=ReservacionResponse)
def buscar_reserva(
    q: str = Query(..., min_length=3, description="Código de reservación o teléfono"),
    db: Session = Depends(get_db),
):
    """Consulta pública por código o teléfono del responsable."""
    termino = q.strip()
    reservacion = db.query(Reservacion).options(
        selectinload(Reservacion.passengers)
    ).filter(
        or_(
            func.lower(Reservacion.reservation_code) == termino.lower(),
            Reservacion.responsible_phone == termino,
        )
    ).order_by(Reservacion.id.desc()).first()

    if not reservacion:
        raise NotFoundException("No se encontró una reservación con ese código o teléfono")
    return reservacion


@router.get("/{reservation_id}", response_model=ReservacionAdminResponse)
def obtener_reserva(
    reservation_id: int,
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    return obtener_reservacion(db, reservation_id)


@router.put("/{reservation_id}", response_model=ReservacionAdminResponse)
def editar_reserva(
    reservation_id: int,
    data: ReservacionUpdate,
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    """Edición de administración: datos del responsable, anfitrión y lista de pasajeros."""
    reservacion = obtener_reservacion(db, reservation_id)

    try:
        for campo in ("responsible_name", "responsible_phone", "responsible_congregation", "is_host"):
            valor = getattr(data, campo)
            if valor is not None:
                setattr(reservacion, campo, valor)

        if data.passengers is not None:
            aplicar_edicion_pasajeros(db, reservacion, data.passengers)
        else:
            reconcile_reservation(db, reservacion)

        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception(f"❌ Error al guardar la reservación {reservation_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al guardar",
        )

    logger.info(f"✏️ Reservación {reservacion.reservation_code} editada por {admin.email}")
    db.expire_all()
    return obtener_reservacion(db, reservation_id)


@router.patch("/{reservation_id}/estado", response_model=ReservacionAdminResponse)
def cambiar_estado(
    reservation_id: int,
    data: EstadoUpdate,
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    """
    Cambio manual de estatus. Solo 'cancelado' se guarda tal cual;
    cualquier otro valor reactiva la reservación y el estado se vuelve
    a calcular a partir de lo pagado.
    """
    reservacion = obtener_reservacion(db, reservation_id)
    anterior = reservacion.status

    try:
        if data.status == CANCELADO:
            reservacion.status = CANCELADO
        else:
            reservacion.status = PENDIENTE
            if anterior == CANCELADO:
                # Mientras estuvo cancelada sus asientos pudieron reasignarse
                for pasajero in reservacion.passengers:
                    validar_asiento(db, pasajero.seat_number, pasajero.id)
            reconcile_reservation(db, reservacion)
        db.commit()
    except HTTPException:
        db.rollback()
        raise

    logger.info(
        f"📝 Estado de {reservacion.reservation_code}: {anterior} → {reservacion.status} "
        f"(solicitado {data.status}, {admin.email})"
    )
    return obtener_reservacion(db, reservation_id)
