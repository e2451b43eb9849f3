from decimal import Decimal

from cash.models import CashMovement, MovementKind
from cash.services import allocate


def test_admin_allocates_cash(api_client, staff_admin, courier):
    api_client.force_authenticate(user=staff_admin)

    resp = api_client.post(
        "/api/v1/cash/movements/",
        {"courier": courier.id, "kind": "ALLOCATION", "currency": "USD", "amount": "500"},
        format="json",
    )

    assert resp.status_code == 201
    assert Decimal(resp.data["balance_after"]) == Decimal("500.00")


def test_delivery_kind_cannot_be_posted(api_client, staff_admin, courier):
    api_client.force_authenticate(user=staff_admin)

    resp = api_client.post(
        "/api/v1/cash/movements/",
        {"courier": courier.id, "kind": "DELIVERY", "currency": "USD", "amount": "5"},
        format="json",
    )

    assert resp.status_code == 400


def test_overdraft_is_conflict(api_client, staff_admin, courier):
    allocate(courier, "USD", Decimal("50"), actor=staff_admin)
    api_client.force_authenticate(user=staff_admin)

    resp = api_client.post(
        "/api/v1/cash/movements/",
        {"courier": courier.id, "kind": "WITHDRAWAL", "currency": "USD", "amount": "60"},
        format="json",
    )

    assert resp.status_code == 409
    assert resp.data["kind"] == "InsufficientBalance"
    courier.refresh_from_db()
    assert courier.balance_usd == Decimal("50.00")


def test_courier_cannot_allocate(api_client, courier):
    api_client.force_authenticate(user=courier)

    resp = api_client.post(
        "/api/v1/cash/movements/",
        {"courier": courier.id, "kind": "ALLOCATION", "currency": "USD", "amount": "500"},
        format="json",
    )

    assert resp.status_code == 403


def test_courier_sells_own_currency(api_client, staff_admin, courier, usd_rate):
    allocate(courier, "USD", Decimal("100"), actor=staff_admin)
    api_client.force_authenticate(user=courier)

    resp = api_client.post(
        "/api/v1/cash/movements/sell-currency/",
        {"usd_amount": "10", "exchange_rate": "410"},
        format="json",
    )

    assert resp.status_code == 201
    assert [leg["currency"] for leg in resp.data] == ["USD", "CUP"]
    # le taux du livreur, pas celui des remises (435)
    assert Decimal(resp.data[1]["amount"]) == Decimal("4100.00")
    assert {Decimal(leg["exchange_rate"]) for leg in resp.data} == {Decimal("410")}


def test_currency_sale_requires_explicit_rate(api_client, staff_admin, courier, usd_rate):
    allocate(courier, "USD", Decimal("100"), actor=staff_admin)
    api_client.force_authenticate(user=courier)

    resp = api_client.post("/api/v1/cash/movements/sell-currency/", {"usd_amount": "10"}, format="json")

    assert resp.status_code == 400
    assert "exchange_rate" in resp.data
    assert CashMovement.objects.filter(kind=MovementKind.CURRENCY_SALE).count() == 0
    courier.refresh_from_db()
    assert courier.balance_usd == Decimal("100.00")


def test_courier_cannot_sell_for_someone_else(api_client, courier, other_courier):
    api_client.force_authenticate(user=courier)

    resp = api_client.post(
        "/api/v1/cash/movements/sell-currency/",
        {"courier": other_courier.id, "usd_amount": "10", "exchange_rate": "400"},
        format="json",
    )

    assert resp.status_code == 403


def test_courier_sees_own_movements_and_balance(api_client, staff_admin, courier, other_courier):
    allocate(courier, "USD", Decimal("100"), actor=staff_admin)
    allocate(other_courier, "USD", Decimal("70"), actor=staff_admin)
    api_client.force_authenticate(user=courier)

    resp = api_client.get("/api/v1/cash/movements/")
    assert resp.data["count"] == 1

    resp = api_client.get("/api/v1/cash/balance/")
    assert resp.status_code == 200
    assert resp.data["balance_usd"] == "100.00"
    assert resp.data["consistent"] is True


def test_admin_reads_any_balance(api_client, staff_admin, courier):
    api_client.force_authenticate(user=staff_admin)

    assert api_client.get("/api/v1/cash/balance/").status_code == 400
    resp = api_client.get(f"/api/v1/cash/balance/?courier={courier.id}")
    assert resp.status_code == 200
    assert CashMovement.objects.count() == 0
