# app/core/pricing.py
# Reglas de cobro compartidas por reservaciones, pagos y paquetes.

from decimal import Decimal, ROUND_CEILING
from typing import Optional, Tuple
from app.config import settings

# Estados de una reservación de viaje
PENDIENTE = "pendiente"
ANTICIPO_PAGADO = "anticipo_pagado"
PAGADO_COMPLETO = "pagado_completo"
CANCELADO = "cancelado"
RESERVATION_STATUSES = (PENDIENTE, ANTICIPO_PAGADO, PAGADO_COMPLETO, CANCELADO)

# Estados de pago de un paquete de atracciones
PAQUETE_PENDIENTE = "pendiente"
PAQUETE_PARCIAL = "parcial"
PAQUETE_PAGADO = "pagado"


def to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def is_free_under6(age: Optional[int]) -> bool:
    """Un pasajero no paga solo si su edad es conocida y menor al límite."""
    return age is not None and age < settings.FREE_AGE_LIMIT


def calculate_totals(payable_count: int, unit_price=None) -> Tuple[Decimal, Decimal]:
    """
    Devuelve (total_amount, deposit_required) para un número de asientos pagados.
    El anticipo se redondea hacia arriba al peso entero.
    """
    price = to_decimal(settings.UNIT_PRICE if unit_price is None else unit_price)
    total = price * payable_count
    deposit = (total * to_decimal(settings.DEPOSIT_RATIO)).to_integral_value(rounding=ROUND_CEILING)
    return total, deposit


def derive_status(current_status: str, amount_paid, total_amount, deposit_required) -> str:
    """
    Estado de la reservación a partir de lo pagado.
    'cancelado' nunca se sobreescribe.
    """
    if current_status == CANCELADO:
        return CANCELADO

    paid = to_decimal(amount_paid)
    total = to_decimal(total_amount)
    deposit = to_decimal(deposit_required)

    if total > 0 and paid >= total:
        return PAGADO_COMPLETO
    if deposit > 0 and paid >= deposit:
        return ANTICIPO_PAGADO
    return PENDIENTE


def derive_package_status(amount_paid, total_amount) -> str:
    paid = to_decimal(amount_paid)
    total = to_decimal(total_amount)

    if total > 0 and paid >= total:
        return PAQUETE_PAGADO
    if paid > 0:
        return PAQUETE_PARCIAL
    return PAQUETE_PENDIENTE
