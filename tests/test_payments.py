from decimal import Decimal

import pytest

from servivent.modules.purchases import PAYMENT_TOLERANCE, derive_payment_status
from servivent.modules.purchases.schemas import PaymentStatus
from servivent.shared.database.models import PurchaseItem, PurchasePayment

from tests.factories import fetch_purchase, seed_purchase


def pay(client, purchase_id, amount, method="Efectivo", notes=None):
    return client.post("/api/v1/registrar-pago-compra", json={
        "purchaseId": purchase_id,
        "amount": amount,
        "paymentDate": "2026-10-18",
        "method": method,
        "notes": notes,
    })


@pytest.fixture
def purchase_id(db_session, catalog):
    """Purchase whose line items add up to 100.00."""
    return seed_purchase(db_session, catalog.branch_id, [
        (catalog.runner_id, 2, 30, "Bs."),
        (catalog.backpack_id, 4, 10, "Bs."),
    ])


# ==================== ESTADO DE PAGO ====================

@pytest.mark.parametrize("total, paid, expected", [
    (100, 0, PaymentStatus.pago_pendiente),
    (100, 40, PaymentStatus.parcialmente_pagado),
    (100, Decimal("99.998"), PaymentStatus.parcialmente_pagado),
    (100, Decimal("99.9995"), PaymentStatus.pagado),
    (100, 100, PaymentStatus.pagado),
    (100, 120, PaymentStatus.pagado),
    (0, 0, PaymentStatus.pagado),
    (Decimal("99.99000000000001"), Decimal("99.99"), PaymentStatus.pagado),
])
def test_derive_payment_status(total, paid, expected):
    assert derive_payment_status(total, paid) == expected


def test_payment_tolerance_is_a_thousandth():
    assert PAYMENT_TOLERANCE == Decimal("0.001")


# ==================== REGISTRAR PAGO ====================

def test_partial_then_full_payment(client, db_session, purchase_id):
    response = pay(client, purchase_id, 40.00)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Pago registrado y estado actualizado."}

    purchase = fetch_purchase(db_session, purchase_id)
    assert purchase.estado_pago == "Parcialmente Pagado"
    assert float(purchase.monto_total) == pytest.approx(100.0)

    pay(client, purchase_id, 60.00, method="Transferencia", notes="Saldo")
    assert fetch_purchase(db_session, purchase_id).estado_pago == "Pagado"

    payments = db_session.query(PurchasePayment).filter(PurchasePayment.id_compra == purchase_id).all()
    assert sorted(float(p.monto) for p in payments) == [40.0, 60.0]
    assert {p.metodo_pago for p in payments} == {"Efectivo", "Transferencia"}


def test_payment_order_does_not_change_final_status(client, db_session, catalog):
    first = seed_purchase(db_session, catalog.branch_id, [(catalog.runner_id, 1, 100, "Bs.")])
    second = seed_purchase(db_session, catalog.branch_id, [(catalog.runner_id, 1, 100, "Bs.")])

    for amount in (60.0, 15.0, 25.0):
        pay(client, first, amount)
    for amount in (25.0, 60.0, 15.0):
        pay(client, second, amount)

    assert fetch_purchase(db_session, first).estado_pago == "Pagado"
    assert fetch_purchase(db_session, second).estado_pago == "Pagado"


def test_total_is_recomputed_from_line_items_and_exchange_rate(client, db_session, catalog):
    purchase_id = seed_purchase(db_session, catalog.branch_id, [
        (catalog.runner_id, 10, 5, "$"),
        (catalog.backpack_id, 2, 26, "Bs."),
    ], tipo_cambio=6.96)

    pay(client, purchase_id, 100.0)

    purchase = fetch_purchase(db_session, purchase_id)
    assert float(purchase.monto_total) == pytest.approx(10 * 5 * 6.96 + 2 * 26)
    assert purchase.estado_pago == "Parcialmente Pagado"


def test_edited_line_items_are_reflected_on_next_payment(client, db_session, purchase_id):
    pay(client, purchase_id, 100.0)
    assert fetch_purchase(db_session, purchase_id).estado_pago == "Pagado"

    db_session.add(PurchaseItem(id_compra=purchase_id, id_producto=7, cantidad=1, costo_unitario=50, moneda="Bs."))
    db_session.commit()

    pay(client, purchase_id, 10.0)

    purchase = fetch_purchase(db_session, purchase_id)
    assert float(purchase.monto_total) == pytest.approx(150.0)
    assert purchase.estado_pago == "Parcialmente Pagado"


def test_payment_for_unknown_purchase(client, db_session, catalog):
    response = pay(client, 999, 10.0)

    assert response.status_code == 400
    assert response.json() == {"msg": "No se encontró la compra con ID 999."}
    assert db_session.query(PurchasePayment).count() == 0


@pytest.mark.parametrize("override", [
    {"amount": 0},
    {"amount": -5},
    {"amount": "40"},
    {"paymentDate": None},
    {"method": "Cheque"},
    {"purchaseId": None},
])
def test_invalid_payment_is_rejected(client, db_session, purchase_id, override):
    payload = {"purchaseId": purchase_id, "amount": 40.0, "paymentDate": "2026-10-18", "method": "QR"}
    payload.update(override)

    response = client.post("/api/v1/registrar-pago-compra", json=payload)

    assert response.status_code == 400
    assert db_session.query(PurchasePayment).count() == 0


# ==================== ELIMINAR PAGO ====================

def test_deleting_payment_recomputes_status(client, db_session, purchase_id):
    pay(client, purchase_id, 40.0)
    pay(client, purchase_id, 60.0)
    sixty = db_session.query(PurchasePayment).filter(PurchasePayment.monto == 60).one()

    response = client.post("/api/v1/eliminar-pago-compra",
                           json={"paymentId": sixty.id, "purchaseId": purchase_id})

    assert response.status_code == 200
    assert response.json()["message"] == "Pago eliminado y estado actualizado."
    assert fetch_purchase(db_session, purchase_id).estado_pago == "Parcialmente Pagado"
    assert db_session.query(PurchasePayment).count() == 1


def test_deleting_last_payment_returns_to_pending(client, db_session, purchase_id):
    pay(client, purchase_id, 40.0)
    payment = db_session.query(PurchasePayment).one()

    client.post("/api/v1/eliminar-pago-compra", json={"paymentId": payment.id, "purchaseId": purchase_id})

    assert fetch_purchase(db_session, purchase_id).estado_pago == "Pago Pendiente"


def test_deleting_payment_of_another_purchase_fails(client, db_session, catalog, purchase_id):
    other = seed_purchase(db_session, catalog.branch_id, [(catalog.runner_id, 1, 10, "Bs.")])
    pay(client, other, 5.0)
    payment = db_session.query(PurchasePayment).one()

    response = client.post("/api/v1/eliminar-pago-compra",
                           json={"paymentId": payment.id, "purchaseId": purchase_id})

    assert response.status_code == 400
    assert response.json()["msg"] == (
        f"No se encontró el pago con ID {payment.id} para la compra {purchase_id}."
    )
    assert db_session.query(PurchasePayment).count() == 1


def test_status_uses_the_stored_rounded_total(client, db_session, catalog):
    # 1 x 1.2345 $ at 6.96 = 8.59212, stored as 8.59
    purchase_id = seed_purchase(db_session, catalog.branch_id, [
        (catalog.runner_id, 1, 1.2345, "$"),
    ], tipo_cambio=6.96)

    pay(client, purchase_id, 8.59)

    purchase = fetch_purchase(db_session, purchase_id)
    assert float(purchase.monto_total) == pytest.approx(8.59)
    assert purchase.estado_pago == "Pagado"


@pytest.mark.parametrize("amount", ["Infinity", "-Infinity", "NaN"])
def test_non_finite_payment_amount_is_rejected(client, db_session, purchase_id, amount):
    body = (
        f'{{"purchaseId": {purchase_id}, "amount": {amount}, '
        f'"paymentDate": "2026-10-18", "method": "Efectivo"}}'
    )

    response = client.post("/api/v1/registrar-pago-compra", content=body,
                           headers={"content-type": "application/json"})

    assert response.status_code == 400
    assert db_session.query(PurchasePayment).count() == 0
    assert fetch_purchase(db_session, purchase_id).estado_pago == "Pago Pendiente"
