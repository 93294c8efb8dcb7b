# 📍 ARCHIVO: app/routers/entradas.py
# 🎯 PROPÓSITO: Compra de entradas a zonas turísticas para los pasajeros de una reservación

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.exceptions import BadRequestException, NotFoundException, PaymentGatewayError
from app.core.mercadopago_service import MercadoPagoService, get_mercadopago_service
from app.core.pricing import CANCELADO
from app.database import get_db
from app.models.orden_entradas import OrdenEntradas
from app.models.pasajero import Pasajero
from app.schemas.entradas import OrdenCreada, OrdenCreate, OrdenResponse
from app.services.entradas import ACTIVIDADES, calcular_montos, construir_items, items_mercadopago
from app.services.reservaciones import buscar_por_codigo

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/catalogo")
def catalogo() -> List[dict]:
    return [
        {
            "activity_id": activity_id,
            "name": actividad["name"],
            "variants": [
                {"variant_id": variant_id, **variante}
                for variant_id, variante in actividad["variants"].items()
            ],
        }
        for activity_id, actividad in ACTIVIDADES.items()
    ]


@router.post("/ordenes", response_model=OrdenCreada, status_code=status.HTTP_201_CREATED)
def crear_orden(
    data: OrdenCreate,
    db: Session = Depends(get_db),
    service: MercadoPagoService = Depends(get_mercadopago_service),
):
    """
    Registra la orden como 'pending'. Con tarjeta se agrega la comisión y se
    crea la preferencia de Mercado Pago; con transferencia solo se guarda.
    """
    reservacion = buscar_por_codigo(db, data.reservation_code)
    if not reservacion:
        raise NotFoundException("No se encontró una reservación con ese código")
    if reservacion.status == CANCELADO:
        raise BadRequestException("Esta reservación está cancelada")

    pasajeros = db.query(Pasajero).filter(Pasajero.reservation_id == reservacion.id).all()
    items = construir_items(data.items, pasajeros)
    subtotal, comision, total = calcular_montos(items, data.payment_method)

    orden = OrdenEntradas(
        reservation_id=reservacion.id,
        items=items,
        subtotal=subtotal,
        commission=comision,
        total_amount=total,
        payment_method=data.payment_method,
        status="pending",
    )
    db.add(orden)
    db.flush()

    init_point = None
    if data.payment_method == "card":
        try:
            preferencia = service.create_preference(
                items=items_mercadopago(items, comision, reservacion.reservation_code),
                external_reference=str(orden.id),
                back_urls=service.back_urls("/comprar-entradas/confirmacion", f"order={orden.id}"),
                payer_name=reservacion.responsible_name,
                metadata={"type": "ticket_order", "reservation_code": reservacion.reservation_code},
            )
        except PaymentGatewayError as e:
            db.rollback()
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)
        orden.preference_id = preferencia.preference_id
        init_point = preferencia.init_point

    db.commit()
    db.refresh(orden)

    logger.info(
        f"🎫 Orden {orden.id} de {reservacion.reservation_code}: {len(items)} entradas, "
        f"${total} ({data.payment_method})"
    )
    return {"order": orden, "init_point": init_point}


@router.get("/ordenes/{order_id}", response_model=OrdenResponse)
def obtener_orden(order_id: int, db: Session = Depends(get_db)):
    orden = db.query(OrdenEntradas).filter(OrdenEntradas.id == order_id).first()
    if not orden:
        raise NotFoundException("Orden no encontrada")
    return orden
