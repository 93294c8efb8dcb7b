# 📍 ARCHIVO: app/services/reservaciones.py
# 🎯 PROPÓSITO: Alta de reservaciones, edición de la lista de pasajeros y asignación de asientos.

import logging
import random
import secrets
import string
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import BadRequestException, ConflictException, NotFoundException
from app.core.pricing import CANCELADO, PENDIENTE
from app.models.grupo import GrupoTour
from app.models.pasajero import Pasajero
from app.models.reservacion import Reservacion
from app.schemas.reservacion import PasajeroCreate, PasajeroEdit, ReservacionCreate
from app.services.reconciliation import reconcile_reservation

logger = logging.getLogger(__name__)


def generar_codigo_reserva() -> str:
    """Formato: BETEL-XXXX (letras mayúsculas y dígitos)"""
    caracteres = string.ascii_uppercase + string.digits
    return f"{settings.RESERVATION_CODE_PREFIX}-" + "".join(random.choices(caracteres, k=4))


def generar_codigo_unico_reserva(db: Session, max_intentos: int = 10) -> str:
    for _ in range(max_intentos):
        codigo = generar_codigo_reserva()
        existe = db.query(Reservacion).filter(Reservacion.reservation_code == codigo).first()
        if not existe:
            return codigo

    # Si falla después de varios intentos, usar timestamp
    timestamp = int(datetime.now().timestamp())
    return f"{settings.RESERVATION_CODE_PREFIX}-{timestamp}"


def generar_codigo_abordaje() -> str:
    return f"{secrets.randbelow(10 ** 6):06d}"


def buscar_por_codigo(db: Session, reservation_code: str) -> Optional[Reservacion]:
    """Búsqueda exacta sin distinguir mayúsculas."""
    return db.query(Reservacion).filter(
        func.lower(Reservacion.reservation_code) == reservation_code.strip().lower()
    ).first()


def _split_name(full_name: str):
    partes = full_name.split(None, 1)
    return partes[0], (partes[1] if len(partes) > 1 else "")


def _pasajeros_para_reserva(data: ReservacionCreate) -> List[PasajeroCreate]:
    if data.passengers:
        if len(data.passengers) != data.seats_total:
            raise BadRequestException(
                f"Se indicaron {data.seats_total} lugares pero se enviaron {len(data.passengers)} pasajeros"
            )
        return data.passengers

    # Un solo adulto sin menores: el responsable es el pasajero
    if data.seats_total == 1 and data.minors_count == 0:
        first_name, last_name = _split_name(data.responsible_name)
        return [PasajeroCreate(
            first_name=first_name,
            last_name=last_name,
            phone=data.responsible_phone,
            congregation=data.responsible_congregation,
        )]

    raise BadRequestException("Se requieren los datos de cada pasajero")


def crear_reservacion(db: Session, data: ReservacionCreate) -> Reservacion:
    """
    Crea la reservación con sus pasajeros y calcula los totales.
    No hace commit.
    """
    pasajeros = _pasajeros_para_reserva(data)

    reservacion = Reservacion(
        reservation_code=generar_codigo_unico_reserva(db),
        boarding_access_code=generar_codigo_abordaje(),
        responsible_name=data.responsible_name,
        responsible_phone=data.responsible_phone,
        responsible_congregation=data.responsible_congregation or None,
        seats_total=0,
        seats_payable=0,
        unit_price=settings.UNIT_PRICE,
        total_amount=0,
        deposit_required=0,
        amount_paid=0,
        status=PENDIENTE,
        is_host=False,
        payment_method=data.payment_method,
    )
    db.add(reservacion)
    db.flush()

    for pasajero in pasajeros:
        db.add(Pasajero(reservation_id=reservacion.id, **pasajero.dict()))

    reconcile_reservation(db, reservacion)
    logger.info(
        f"🎫 Reservación {reservacion.reservation_code} creada: "
        f"{reservacion.seats_total} lugares, {reservacion.seats_payable} pagan"
    )
    return reservacion


def normalizar_asiento(seat_number: Optional[str]) -> Optional[str]:
    if seat_number is None:
        return None
    seat = seat_number.strip()
    if not seat:
        return None
    if not seat.isdigit() or not 1 <= int(seat) <= settings.TOTAL_SEATS:
        raise BadRequestException(f"Asiento inválido, debe estar entre 1 y {settings.TOTAL_SEATS}")
    return str(int(seat))


def validar_asiento(db: Session, seat_number: Optional[str], passenger_id: Optional[int] = None) -> Optional[str]:
    """
    Normaliza el asiento y verifica que no lo ocupe otro pasajero
    de una reservación no cancelada.
    """
    seat = normalizar_asiento(seat_number)
    if seat is None:
        return None

    db.flush()
    query = db.query(Pasajero).join(Reservacion).filter(
        Pasajero.seat_number == seat,
        Reservacion.status != CANCELADO,
    )
    if passenger_id is not None:
        query = query.filter(Pasajero.id != passenger_id)

    ocupante = query.first()
    if ocupante:
        raise ConflictException(f"El asiento {seat} ya está asignado a {ocupante.full_name}")
    return seat


def eliminar_pasajero(db: Session, pasajero: Pasajero) -> None:
    # Un capitán eliminado deja al grupo sin capitán
    db.query(GrupoTour).filter(
        GrupoTour.captain_passenger_id == pasajero.id
    ).update({GrupoTour.captain_passenger_id: None}, synchronize_session=False)
    db.delete(pasajero)


def aplicar_edicion_pasajeros(
    db: Session,
    reservacion: Reservacion,
    ediciones: List[PasajeroEdit],
    permitir_asientos: bool = True,
) -> None:
    """
    Sustituye la lista de pasajeros: elimina los que no vienen, actualiza los
    que traen id e inserta los nuevos. Todo en la transacción de quien llama.
    """
    if not ediciones:
        raise BadRequestException("La reservación debe tener al menos un pasajero")

    existentes = {p.id: p for p in db.query(Pasajero).filter(Pasajero.reservation_id == reservacion.id).all()}
    ids_enviados = {e.id for e in ediciones if e.id is not None}

    desconocidos = ids_enviados - set(existentes)
    if desconocidos:
        raise NotFoundException(f"Pasajeros no encontrados en la reservación: {sorted(desconocidos)}")

    for passenger_id, pasajero in existentes.items():
        if passenger_id not in ids_enviados:
            eliminar_pasajero(db, pasajero)
        elif permitir_asientos:
            # Se liberan antes de validar para permitir intercambios en la misma edición
            pasajero.seat_number = None
    db.flush()

    campos = ("first_name", "last_name", "phone", "congregation", "age", "observations")
    for edicion in ediciones:
        valores = {campo: getattr(edicion, campo) for campo in campos}
        if edicion.id is not None:
            pasajero = existentes[edicion.id]
            for campo, valor in valores.items():
                setattr(pasajero, campo, valor)
            if permitir_asientos:
                pasajero.seat_number = validar_asiento(db, edicion.seat_number, pasajero.id)
        else:
            pasajero = Pasajero(reservation_id=reservacion.id, **valores)
            if permitir_asientos:
                pasajero.seat_number = validar_asiento(db, edicion.seat_number)
            db.add(pasajero)
        db.flush()

    reconcile_reservation(db, reservacion)
