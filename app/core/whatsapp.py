# app/core/whatsapp.py
# Enlaces wa.me con el resumen de la reservación. No hay integración con la API de WhatsApp.

from typing import Optional, Sequence
from urllib.parse import quote

from app.config import settings
from app.core.pricing import is_free_under6, to_decimal


def format_money(amount) -> str:
    value = to_decimal(amount)
    if value == value.to_integral_value():
        return f"{value:,.0f}"
    return f"{value:,.2f}"


def build_whatsapp_message(
    reservation_code: str,
    responsible_name: str,
    responsible_phone: str,
    congregation: Optional[str],
    passengers: Sequence,
    seats_payable: int,
    total_amount,
    deposit_required,
) -> str:
    """Mensaje prellenado que el responsable envía para confirmar su reservación."""
    minors = [p for p in passengers if is_free_under6(p.age)]
    seats_total = len(passengers)

    message = f"*Reserva: {reservation_code}*\n\n"
    message += f"*Responsable:* {responsible_name}\n"
    message += f"*Tel:* {responsible_phone}\n"
    if congregation:
        message += f"*Congregación:* {congregation}\n"
    message += "\n"
    message += f"*Lugares:* {seats_total}"
    if minors:
        plural = "es" if len(minors) > 1 else ""
        message += f" (pagan {seats_payable}; {len(minors)} menor{plural} <6)"
    message += "\n"
    message += f"*Total:* ${format_money(total_amount)} MXN\n"
    message += f"*Anticipo mínimo (50%):* ${format_money(deposit_required)} MXN\n\n"

    message += "*Pasajeros:*\n"
    for i, p in enumerate(passengers, start=1):
        line = f"{i}. {p.first_name} {p.last_name}".rstrip()
        if p.congregation:
            line += f" - {p.congregation}"
        if is_free_under6(p.age):
            line += f" ({p.age} años)"
        message += line + "\n"

    message += "\n*Método de pago:* Transferencia\n"
    message += f"*CLABE:* {settings.TRANSFER_CLABE}\n"
    message += f"*Banco:* {settings.TRANSFER_BANK}\n"
    message += f"*Beneficiario:* {settings.TRANSFER_BENEFICIARY}\n\n"
    message += "Adjunta tu comprobante a este chat.\n"
    message += "Los asientos se asignan por orden de pago confirmado."

    return message


def get_whatsapp_link(message: str, phone: str = None) -> str:
    return f"https://wa.me/{phone or settings.WHATSAPP_NUMBER}?text={quote(message, safe='')}"
