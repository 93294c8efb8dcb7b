import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import BadRequestException, NotFoundException, PaymentGatewayError
from app.core.mercadopago_service import MercadoPagoService, get_mercadopago_service
from app.core.pricing import CANCELADO, to_decimal
from app.core.security import get_current_admin
from app.database import get_db
from app.models.administrador import Administrador
from app.models.pago import Pago
from app.models.reservacion import Reservacion
from app.schemas.pago import (
    PagoCreate,
    PagoRegistrado,
    PagoResponse,
    PreferenciaRequest,
    PreferenciaResponse,
    WebhookData,
)
from app.services.payments import registrar_pago_reservacion

logger = logging.getLogger(__name__)
router = APIRouter()


def _obtener_reservacion(db: Session, reservation_id: int) -> Reservacion:
    reservacion = db.query(Reservacion).filter(Reservacion.id == reservation_id).first()
    if not reservacion:
        raise NotFoundException("Reservación no encontrada")
    return reservacion


@router.post("/", response_model=PagoRegistrado, status_code=status.HTTP_201_CREATED)
def registrar_pago(
    pago_data: PagoCreate,
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    reservacion = _obtener_reservacion(db, pago_data.reservation_id)

    try:
        pago = registrar_pago_reservacion(db, reservacion, pago_data)
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception(f"❌ Error al registrar el pago de la reservación {pago_data.reservation_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al registrar el pago",
        )

    db.refresh(pago)
    db.refresh(reservacion)
    return {
        "payment": pago,
        "amount_paid": reservacion.amount_paid,
        "total_amount": reservacion.total_amount,
        "status": reservacion.status,
    }


@router.get("/reserva/{reservation_id}", response_model=List[PagoResponse])
def pagos_de_reserva(
    reservation_id: int,
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    _obtener_reservacion(db, reservation_id)
    return db.query(Pago).filter(Pago.reservation_id == reservation_id).order_by(Pago.id).all()


@router.post("/preferencia", response_model=PreferenciaResponse)
def crear_preferencia(
    data: PreferenciaRequest,
    db: Session = Depends(get_db),
    service: MercadoPagoService = Depends(get_mercadopago_service),
):
    """Preferencia de Mercado Pago para pagar con tarjeta el anticipo, el saldo o un monto dado."""
    reservacion = _obtener_reservacion(db, data.reservation_id)
    if reservacion.status == CANCELADO:
        raise BadRequestException("Esta reservación está cancelada")

    if data.amount is not None:
        monto = to_decimal(data.amount)
        descripcion = data.description or "Pago adicional reservación"
    elif data.is_deposit:
        monto = to_decimal(reservacion.deposit_required)
        descripcion = f"Anticipo 50% - {reservacion.reservation_code} ({reservacion.seats_payable} lugares)"
    else:
        monto = to_decimal(reservacion.total_amount) - to_decimal(reservacion.amount_paid)
        descripcion = f"Pago completo - {reservacion.reservation_code} ({reservacion.seats_payable} lugares)"

    if monto <= 0:
        raise BadRequestException("La reservación no tiene saldo pendiente")

    items = [{
        "id": reservacion.reservation_code,
        "title": f"Vamos a Betel 2026 - {reservacion.reservation_code}",
        "description": descripcion,
        "quantity": 1,
        "unit_price": float(monto),
        "currency_id": settings.MP_CURRENCY,
    }]

    try:
        preferencia = service.create_preference(
            items=items,
            external_reference=reservacion.reservation_code,
            back_urls=service.back_urls("/reservar/confirmacion", f"code={reservacion.reservation_code}"),
            payer_name=reservacion.responsible_name,
            metadata={"type": "reservation", "reservation_id": reservacion.id},
        )
    except PaymentGatewayError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)

    reservacion.payment_method = "card"
    reservacion.mp_payment_status = "pending"
    db.commit()
    return preferencia


@router.post("/webhook", status_code=status.HTTP_200_OK)
async def webhook_mercadopago(data: WebhookData):
    """
    Notificaciones de Mercado Pago. Se responde 200 siempre para evitar
    reintentos; los pagos con tarjeta se concilian manualmente con /pagos.
    """
    if data.type == "payment":
        payment_id = (data.data or {}).get("id")
        logger.info(f"🎯 [WEBHOOK] Notificación de pago recibida: {payment_id}")
    return {"received": True}
