from decimal import Decimal

import pytest

from accounting.models import AccountingMovement, MovementKind
from cash.services import allocate
from disputes.models import Dispute, DisputeStatus
from disputes.services import add_comment, open_dispute
from remittances.services import lifecycle


@pytest.fixture
def delivered(staff_admin, courier, reseller, usd_rate, tier, remittance_data):
    allocate(courier, "CUP", Decimal("100000"), actor=staff_admin)
    remittance = lifecycle.create_remittance(remittance_data, actor=reseller, reseller=reseller)
    lifecycle.assign(remittance, courier, actor=staff_admin)
    return lifecycle.deliver(remittance, actor=courier)


def test_reseller_opens_dispute(api_client, reseller, delivered):
    api_client.force_authenticate(user=reseller)

    resp = api_client.post(
        "/api/v1/disputes/",
        {"remittance": delivered.id, "kind": "WRONG_AMOUNT", "description": "Le bénéficiaire a reçu 30 000 CUP."},
        format="json",
    )

    assert resp.status_code == 201
    assert resp.data["status"] == DisputeStatus.OPEN
    assert resp.data["tracking_code"] == delivered.tracking_code
    assert resp.data["reported_by"] == reseller.id


def test_short_description_rejected(api_client, reseller, delivered):
    api_client.force_authenticate(user=reseller)

    resp = api_client.post(
        "/api/v1/disputes/",
        {"remittance": delivered.id, "kind": "OTHER", "description": "court"},
        format="json",
    )

    assert resp.status_code == 400
    assert Dispute.objects.count() == 0


def test_courier_cannot_open_dispute(api_client, courier, delivered):
    api_client.force_authenticate(user=courier)

    resp = api_client.post(
        "/api/v1/disputes/",
        {"remittance": delivered.id, "kind": "OTHER", "description": "Client absent au rendez-vous."},
        format="json",
    )

    assert resp.status_code == 403


def test_reseller_cannot_resolve(api_client, reseller, delivered):
    dispute = open_dispute(delivered, "NOT_DELIVERED", "Rien reçu à ce jour.", actor=reseller)
    api_client.force_authenticate(user=reseller)

    resp = api_client.post(
        f"/api/v1/disputes/{dispute.id}/resolve/",
        {"resolution": "ok", "resolution_type": "FULL_REFUND"},
        format="json",
    )

    assert resp.status_code == 403


def test_admin_resolves_with_refund(api_client, staff_admin, reseller, delivered):
    dispute = open_dispute(delivered, "NOT_DELIVERED", "Rien reçu à ce jour.", actor=reseller)
    api_client.force_authenticate(user=staff_admin)

    resp = api_client.post(
        f"/api/v1/disputes/{dispute.id}/resolve/",
        {"resolution": "Remise perdue", "resolution_type": "PARTIAL_REFUND", "refund_amount": "50"},
        format="json",
    )

    assert resp.status_code == 200
    assert resp.data["status"] == DisputeStatus.RESOLVED
    assert Decimal(resp.data["refund_amount"]) == Decimal("50.00")
    assert AccountingMovement.objects.get(kind=MovementKind.EXPENSE).amount == Decimal("50.00")

    resp = api_client.post(
        f"/api/v1/disputes/{dispute.id}/status/",
        {"status": "INVESTIGATING"},
        format="json",
    )
    assert resp.status_code == 409
    assert resp.data["kind"] == "InvalidStateTransition"


def test_internal_notes_hidden_from_reseller(api_client, staff_admin, reseller, delivered):
    dispute = open_dispute(delivered, "NOT_DELIVERED", "Rien reçu à ce jour.", actor=reseller)
    add_comment(dispute, staff_admin, "Livreur à recontacter.", internal=True)

    api_client.force_authenticate(user=reseller)
    resp = api_client.get(f"/api/v1/disputes/{dispute.id}/comments/")
    assert resp.status_code == 200
    assert all(not comment["internal"] for comment in resp.data)

    api_client.force_authenticate(user=staff_admin)
    resp = api_client.get(f"/api/v1/disputes/{dispute.id}/comments/")
    assert any(comment["internal"] for comment in resp.data)


def test_reseller_sees_only_own_disputes(api_client, staff_admin, reseller, delivered):
    open_dispute(delivered, "OTHER", "Réclamation du siège.", actor=staff_admin)
    open_dispute(delivered, "NOT_DELIVERED", "Rien reçu à ce jour.", actor=reseller)

    api_client.force_authenticate(user=reseller)
    assert api_client.get("/api/v1/disputes/").data["count"] == 1

    api_client.force_authenticate(user=staff_admin)
    assert api_client.get("/api/v1/disputes/").data["count"] == 2
    resp = api_client.get("/api/v1/disputes/stats/")
    assert resp.status_code == 200
    assert resp.data["active"] == 2
