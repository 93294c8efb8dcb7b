from decimal import Decimal

import pytest

from app.core.pricing import (
    ANTICIPO_PAGADO,
    CANCELADO,
    PAGADO_COMPLETO,
    PENDIENTE,
    calculate_totals,
    derive_package_status,
    derive_status,
    is_free_under6,
)


@pytest.mark.parametrize("age,expected", [
    (None, False),
    (0, True),
    (5, True),
    (6, False),
    (40, False),
])
def test_is_free_under6(age, expected):
    assert is_free_under6(age) is expected


def test_calculate_totals_three_payable():
    total, deposit = calculate_totals(3)
    assert total == Decimal("5400")
    assert deposit == Decimal("2700")


def test_calculate_totals_rounds_deposit_up():
    total, deposit = calculate_totals(1, unit_price=1801)
    assert total == Decimal("1801")
    assert deposit == Decimal("901")


def test_calculate_totals_zero_payable():
    assert calculate_totals(0) == (Decimal("0"), Decimal("0"))


@pytest.mark.parametrize("paid,expected", [
    (0, PENDIENTE),
    (2699, PENDIENTE),
    (2700, ANTICIPO_PAGADO),
    (5399.99, ANTICIPO_PAGADO),
    (5400, PAGADO_COMPLETO),
    (6000, PAGADO_COMPLETO),
])
def test_derive_status_thresholds(paid, expected):
    assert derive_status(PENDIENTE, paid, 5400, 2700) == expected


def test_derive_status_cancelled_is_sticky():
    assert derive_status(CANCELADO, 5400, 5400, 2700) == CANCELADO


def test_derive_status_downgrades_when_total_grows():
    # Antes estaba pagado; al crecer el total vuelve a anticipo
    assert derive_status(PAGADO_COMPLETO, 5400, 7200, 3600) == ANTICIPO_PAGADO


def test_derive_status_zero_total_stays_pending():
    assert derive_status(PENDIENTE, 0, 0, 0) == PENDIENTE


@pytest.mark.parametrize("paid,total,expected", [
    (0, 350, "pendiente"),
    (100, 350, "parcial"),
    (350, 350, "pagado"),
    (0, 0, "pendiente"),
])
def test_derive_package_status(paid, total, expected):
    assert derive_package_status(paid, total) == expected
