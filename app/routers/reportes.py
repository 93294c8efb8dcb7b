from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func, and_
from app.database import get_db
from app.core.pricing import CANCELADO, PENDIENTE, PAQUETE_PAGADO
from app.core.security import get_current_admin
from app.models.administrador import Administrador
from app.models.reservacion import Reservacion
from app.models.paquete import PaqueteReserva
from app.schemas.reporte import ResumenFinanciero, ResumenPaquetes

router = APIRouter()

@router.get("/resumen", response_model=ResumenFinanciero)
def resumen_financiero(db: Session = Depends(get_db), admin: Administrador = Depends(get_current_admin)):
    # Los anfitriones y las reservaciones canceladas no cuentan en las finanzas
    query = db.query(
        func.count(Reservacion.id).label("total_reservations"),
        func.coalesce(func.sum(Reservacion.seats_total), 0).label("total_seats"),
        func.coalesce(func.sum(Reservacion.seats_payable), 0).label("seats_payable"),
        func.coalesce(func.sum(Reservacion.total_amount), 0).label("total_amount"),
        func.coalesce(func.sum(Reservacion.amount_paid), 0).label("total_paid"),
    ).filter(
        Reservacion.is_host.is_(False),
        Reservacion.status != CANCELADO,
    )

    result = query.first()

    # Pendientes de anticipo: aún no cubren el 50%
    pending_deposits = db.query(func.count(Reservacion.id)).filter(
        and_(
            Reservacion.is_host.is_(False),
            Reservacion.status == PENDIENTE,
            Reservacion.amount_paid < Reservacion.deposit_required,
        )
    ).scalar()

    total_amount = float(result.total_amount or 0)
    total_paid = float(result.total_paid or 0)

    return {
        "total_reservations": result.total_reservations or 0,
        "total_seats": int(result.total_seats or 0),
        "seats_payable": int(result.seats_payable or 0),
        "total_amount": total_amount,
        "total_paid": total_paid,
        "total_pending": total_amount - total_paid,
        "pending_deposits": pending_deposits or 0,
    }

@router.get("/paquetes", response_model=ResumenPaquetes)
def resumen_paquetes(db: Session = Depends(get_db), admin: Administrador = Depends(get_current_admin)):
    result = db.query(
        func.count(PaqueteReserva.id).label("total_reservations"),
        func.coalesce(func.sum(PaqueteReserva.num_people), 0).label("total_people"),
        func.coalesce(func.sum(PaqueteReserva.total_amount), 0).label("total_amount"),
        func.coalesce(func.sum(PaqueteReserva.amount_paid), 0).label("total_collected"),
    ).first()

    pending_count = db.query(func.count(PaqueteReserva.id)).filter(
        PaqueteReserva.payment_status != PAQUETE_PAGADO
    ).scalar()

    return {
        "total_reservations": result.total_reservations or 0,
        "total_people": int(result.total_people or 0),
        "total_amount": float(result.total_amount or 0),
        "total_collected": float(result.total_collected or 0),
        "pending_count": pending_count or 0,
    }
