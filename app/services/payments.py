# 📍 ARCHIVO: app/services/payments.py
# 🎯 PROPÓSITO: Registro de pagos de reservaciones y de paquetes de atracciones.
# Ambos caminos recalculan lo pagado como la suma de sus pagos y derivan el
# estado con las reglas de app.core.pricing.

import logging
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.pricing import derive_package_status, to_decimal
from app.models.pago import Pago
from app.models.paquete import PagoPaquete, PaqueteReserva
from app.models.reservacion import Reservacion
from app.schemas.pago import PagoBase
from app.schemas.paquete import PagoPaqueteCreate
from app.services.reconciliation import reconcile_reservation

logger = logging.getLogger(__name__)


def format_payment_line(fecha: datetime, amount, method: str, reference: str = None, note: str = None) -> str:
    """Línea para las notas del paquete, p. ej. [Pago 05/02/2026: $175 - efectivo - Ref: 123]"""
    linea = f"[Pago {fecha.strftime('%d/%m/%Y')}: ${amount:g} - {method}"
    if reference:
        linea += f" - Ref: {reference}"
    if note:
        linea += f" - {note}"
    return linea + "]"


def registrar_pago_reservacion(db: Session, reservacion: Reservacion, data: PagoBase) -> Pago:
    """Agrega un pago y actualiza amount_paid y status. No hace commit."""
    pago = Pago(
        reservation_id=reservacion.id,
        amount=to_decimal(data.amount),
        method=data.method,
        reference=data.reference or None,
        note=data.note or None,
    )
    db.add(pago)
    db.flush()

    total_pagado = db.query(func.coalesce(func.sum(Pago.amount), 0)).filter(
        Pago.reservation_id == reservacion.id
    ).scalar()
    reservacion.amount_paid = to_decimal(total_pagado)

    # La reconciliación también deriva el estado a partir de lo pagado
    reconcile_reservation(db, reservacion)

    logger.info(
        f"💰 Pago de ${data.amount} registrado para {reservacion.reservation_code}; "
        f"pagado {reservacion.amount_paid} de {reservacion.total_amount} ({reservacion.status})"
    )
    return pago


def registrar_pago_paquete(db: Session, paquete: PaqueteReserva, data: PagoPaqueteCreate) -> PagoPaquete:
    """Agrega un pago al paquete, suma lo pagado y deja constancia en las notas. No hace commit."""
    pago = PagoPaquete(
        package_reservation_id=paquete.id,
        amount=to_decimal(data.amount),
        method=data.method,
        reference=data.reference or None,
        note=data.note or None,
    )
    db.add(pago)
    db.flush()

    total_pagado = db.query(func.coalesce(func.sum(PagoPaquete.amount), 0)).filter(
        PagoPaquete.package_reservation_id == paquete.id
    ).scalar()
    paquete.amount_paid = to_decimal(total_pagado)
    paquete.payment_status = derive_package_status(paquete.amount_paid, paquete.total_amount)

    linea = format_payment_line(datetime.now(), data.amount, data.method, data.reference, data.note)
    paquete.notes = f"{paquete.notes}\n{linea}" if paquete.notes else linea
    db.flush()

    logger.info(
        f"💰 Pago de ${data.amount} al paquete {paquete.id} ({paquete.package_type}); "
        f"estado {paquete.payment_status}"
    )
    return pago
