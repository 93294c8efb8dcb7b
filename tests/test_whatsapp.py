from decimal import Decimal
from types import SimpleNamespace

from app.core.whatsapp import build_whatsapp_message, format_money, get_whatsapp_link


def _p(first_name, age, congregation=None):
    return SimpleNamespace(first_name=first_name, last_name="Pérez", age=age, congregation=congregation)


def test_format_money():
    assert format_money(5400) == "5,400"
    assert format_money(Decimal("2700.50")) == "2,700.50"
    assert format_money(None) == "0"


def test_mensaje_con_menores():
    mensaje = build_whatsapp_message(
        "BETEL-AB12", "Juan Pérez", "9611234567", "Centro",
        [_p("Juan", 40, "Centro"), _p("Sofía", 4)], 1, 1800, 900,
    )
    assert mensaje.startswith("*Reserva: BETEL-AB12*")
    assert "*Lugares:* 2 (pagan 1; 1 menor <6)" in mensaje
    assert "*Total:* $1,800 MXN" in mensaje
    assert "*Anticipo mínimo (50%):* $900 MXN" in mensaje
    assert "1. Juan Pérez - Centro" in mensaje
    assert "2. Sofía Pérez (4 años)" in mensaje


def test_link_codifica_el_mensaje():
    link = get_whatsapp_link("Hola & adiós", phone="5210000000000")
    assert link == "https://wa.me/5210000000000?text=Hola%20%26%20adi%C3%B3s"
