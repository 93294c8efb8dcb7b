from decimal import Decimal
from types import SimpleNamespace

from app.core.pricing import ANTICIPO_PAGADO, CANCELADO, PAGADO_COMPLETO, PENDIENTE
from app.models.pago import Pago
from app.models.pasajero import Pasajero
from app.models.reservacion import Reservacion
from app.services.reconciliation import plan_reservation, reconcile_all, reconcile_reservation


def _reservation(**kwargs):
    datos = dict(
        id=1,
        reservation_code="BETEL-TEST",
        seats_total=0,
        seats_payable=0,
        unit_price=Decimal("1800"),
        total_amount=Decimal("0"),
        deposit_required=Decimal("0"),
        amount_paid=Decimal("0"),
        status=PENDIENTE,
    )
    datos.update(kwargs)
    return SimpleNamespace(**datos)


def _passenger(id, age, free=False):
    return SimpleNamespace(id=id, age=age, is_free_under6=free)


def test_plan_three_adults_and_one_child():
    plan = plan_reservation(_reservation(), [
        _passenger(1, 30), _passenger(2, 28), _passenger(3, 12), _passenger(4, 4),
    ])

    assert plan.changes["seats_total"][1] == 4
    assert plan.changes["seats_payable"][1] == 3
    assert plan.changes["total_amount"][1] == Decimal("5400")
    assert plan.changes["deposit_required"][1] == Decimal("2700")
    assert [(f.passenger_id, f.is_free_under6) for f in plan.passenger_fixes] == [(4, True)]


def test_plan_unknown_age_pays():
    plan = plan_reservation(_reservation(), [_passenger(1, None, free=True)])
    assert plan.passenger_fixes[0].is_free_under6 is False
    assert plan.changes["seats_payable"][1] == 1


def test_plan_consistent_reservation_has_no_changes():
    reservation = _reservation(
        seats_total=2,
        seats_payable=2,
        total_amount=Decimal("3600"),
        deposit_required=Decimal("1800"),
        amount_paid=Decimal("1800"),
        status=ANTICIPO_PAGADO,
    )
    plan = plan_reservation(reservation, [_passenger(1, 30), _passenger(2, 31)])
    assert not plan.has_changes


def test_plan_keeps_cancelled_status():
    reservation = _reservation(amount_paid=Decimal("9999"), status=CANCELADO)
    plan = plan_reservation(reservation, [_passenger(1, 30)])
    assert "status" not in plan.changes


def test_plan_uses_given_unit_price():
    plan = plan_reservation(_reservation(), [_passenger(1, 30)], unit_price=1700)
    assert plan.changes["total_amount"][1] == Decimal("1700")
    assert plan.changes["unit_price"][1] == Decimal("1700")


def _legacy_reservation(db, code, passengers, **kwargs):
    """Reservación con totales desfasados, como las que dejaba el sistema anterior."""
    datos = dict(
        reservation_code=code,
        boarding_access_code="123456",
        responsible_name="Responsable",
        responsible_phone="9611234567",
        seats_total=1,
        seats_payable=1,
        unit_price=1700,
        total_amount=1700,
        deposit_required=850,
        amount_paid=0,
        status=PENDIENTE,
    )
    datos.update(kwargs)
    reservation = Reservacion(**datos)
    db.add(reservation)
    db.flush()
    for first_name, age, free in passengers:
        db.add(Pasajero(reservation_id=reservation.id, first_name=first_name, age=age, is_free_under6=free))
    db.commit()
    return reservation


def test_reconcile_all_fixes_drift_and_is_idempotent(db):
    drifted = _legacy_reservation(db, "BETEL-AAAA", [("Ana", 30, True), ("Beto", 3, False), ("Caro", 8, False)])
    paid = _legacy_reservation(
        db, "BETEL-BBBB", [("Dani", 50, False)],
        unit_price=1800, total_amount=1800, deposit_required=900, amount_paid=1800, status=PENDIENTE,
    )

    report = reconcile_all(db)
    assert report.reservations_checked == 2
    assert report.passengers_updated == 2
    assert report.reservations_updated == 2

    db.refresh(drifted)
    assert drifted.seats_total == 3
    assert drifted.seats_payable == 2
    assert drifted.total_amount == Decimal("3600")
    assert drifted.deposit_required == Decimal("1800")

    db.refresh(paid)
    assert paid.status == PAGADO_COMPLETO

    again = reconcile_all(db)
    assert again.reservations_updated == 0
    assert again.passengers_updated == 0


def test_reconcile_after_passenger_delete(db):
    reservation = _legacy_reservation(db, "BETEL-CCCC", [("Ana", 30, False), ("Beto", 31, False), ("Caro", 32, False)])
    reconcile_reservation(db, reservation)
    db.commit()
    assert reservation.total_amount == Decimal("5400")

    victim = db.query(Pasajero).filter(Pasajero.first_name == "Caro").one()
    db.delete(victim)
    reconcile_reservation(db, reservation)
    db.commit()

    db.refresh(reservation)
    assert reservation.seats_total == 2
    assert reservation.seats_payable == 2
    assert reservation.total_amount == Decimal("3600")
    assert reservation.deposit_required == Decimal("1800")


def test_reconcile_payment_sum_drives_status(db):
    reservation = _legacy_reservation(db, "BETEL-DDDD", [("Ana", 30, False), ("Beto", 31, False)])
    db.add(Pago(reservation_id=reservation.id, amount=1800, method="efectivo"))
    reservation.amount_paid = 1800
    reconcile_reservation(db, reservation)
    db.commit()

    db.refresh(reservation)
    assert reservation.status == ANTICIPO_PAGADO
