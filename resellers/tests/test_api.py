from decimal import Decimal

from resellers.services import accrue, record_payment


def test_admin_records_payment(api_client, staff_admin, reseller):
    accrue(reseller, Decimal("30"))
    api_client.force_authenticate(user=staff_admin)

    resp = api_client.post(
        "/api/v1/resellers/payments/",
        {"reseller": reseller.id, "amount": "25", "method": "Zelle", "reference": "ZL-88"},
        format="json",
    )

    assert resp.status_code == 201
    assert resp.data["balance_after"] == "5.00"


def test_overpayment_is_conflict(api_client, staff_admin, reseller):
    api_client.force_authenticate(user=staff_admin)

    resp = api_client.post(
        "/api/v1/resellers/payments/",
        {"reseller": reseller.id, "amount": "1", "method": "Zelle"},
        format="json",
    )

    assert resp.status_code == 409
    assert resp.data["kind"] == "InsufficientBalance"


def test_reseller_cannot_record_payments(api_client, reseller):
    api_client.force_authenticate(user=reseller)

    resp = api_client.post(
        "/api/v1/resellers/payments/",
        {"reseller": reseller.id, "amount": "1", "method": "Zelle"},
        format="json",
    )

    assert resp.status_code == 403


def test_reseller_balance_and_payments(api_client, staff_admin, reseller):
    accrue(reseller, Decimal("30"))
    record_payment(reseller, Decimal("10"), "Zelle", actor=staff_admin)
    api_client.force_authenticate(user=reseller)

    resp = api_client.get("/api/v1/resellers/balance/")
    assert resp.status_code == 200
    assert resp.data["pending_balance"] == "20.00"
    assert resp.data["total_paid"] == "10.00"

    resp = api_client.get("/api/v1/resellers/payments/")
    assert resp.data["count"] == 1


def test_courier_has_no_reseller_balance(api_client, courier):
    api_client.force_authenticate(user=courier)

    assert api_client.get("/api/v1/resellers/balance/").status_code == 403
